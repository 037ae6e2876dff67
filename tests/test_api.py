# ========================
# tests/test_api.py
# ========================

import unittest
import tempfile
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

import api_server
from src.utils.config import Config
from src.viewer import ViewerSession

TEST_CSV = """Proto-Seediq,Proto-Toda-Truku,Proto-Truku,Gloss,Cognates
*qsiya,*qsiya,*qsiya,`water',Tgdaya qsiya
*baga,*baga,*baga,`hand; arm',Tgdaya baga
*=hulis,*hulis,*hulis,`stone',Tgdaya hulis
"""

GLOSS = 1
COGNATES = 2

class APITestCase(unittest.TestCase):
    """Runs the app in-process against a temporary data file."""

    csv_content = TEST_CSV

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        path = os.path.join(self.tmp.name, 'data.csv')
        if self.csv_content is not None:
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(self.csv_content)

        original = api_server.session
        self.addCleanup(setattr, api_server, 'session', original)
        api_server.session = ViewerSession(Config({'data_source': path, 'search_debounce_ms': 200}))

        self.client = TestClient(api_server.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

class TestLoadedAPI(APITestCase):

    def test_health_endpoint(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["status"], "healthy")
        self.assertTrue(data["loaded"])
        self.assertFalse(data["loading"])
        self.assertEqual(data["rows"], 3)

    def test_root_endpoint(self):
        data = self.client.get("/").json()
        self.assertIn("endpoints", data)
        self.assertEqual(data["dashboard_url"], "/dashboard")

    def test_view(self):
        data = self.client.get("/view").json()
        self.assertEqual(data["headers"], ["Proto-Seediq", "Gloss", "Cognates"])
        self.assertEqual(data["rows"][2], ["*hulis", "stone", "Tgdaya hulis"])
        self.assertEqual(data["row_count"], 3)
        self.assertEqual(data["sortable_columns"], [0, 1])
        self.assertIsNone(data["sort"])

    def test_search(self):
        response = self.client.post("/search", json={"0": "QS"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["rows"], [["*qsiya", "water", "Tgdaya qsiya"]])
        self.assertEqual(data["total_rows"], 3)

        # Clearing the term brings every row back
        data = self.client.post("/search", json={"0": ""}).json()
        self.assertEqual(data["row_count"], 3)

    def test_search_rejects_bad_keys(self):
        response = self.client.post("/search", json={"gloss": "water"})
        self.assertEqual(response.status_code, 422)

    def test_sort_toggle(self):
        data = self.client.post(f"/sort/{GLOSS}").json()
        self.assertEqual(data["sort"], {"column": GLOSS, "direction": "asc"})
        self.assertEqual([row[GLOSS] for row in data["rows"]], ["hand; arm", "stone", "water"])

        data = self.client.post(f"/sort/{GLOSS}").json()
        self.assertEqual(data["sort"], {"column": GLOSS, "direction": "desc"})
        self.assertEqual([row[GLOSS] for row in data["rows"]], ["water", "stone", "hand; arm"])

    def test_sort_rejects_other_columns(self):
        self.client.post(f"/sort/{GLOSS}")

        response = self.client.post(f"/sort/{COGNATES}")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], api_server.NOT_SORTABLE_MSG)

        self.assertEqual(self.client.post("/sort/9").status_code, 404)

        # The active sort is unchanged
        data = self.client.get("/view").json()
        self.assertEqual(data["sort"], {"column": GLOSS, "direction": "asc"})

    def test_search_keeps_sort(self):
        self.client.post(f"/sort/{GLOSS}")
        self.client.post(f"/sort/{GLOSS}")
        data = self.client.post("/search", json={str(GLOSS): "a"}).json()
        self.assertEqual([row[GLOSS] for row in data["rows"]], ["water", "hand; arm"])

    def test_stats(self):
        data = self.client.get("/stats").json()
        self.assertEqual(data["rows_loaded"], 3)
        self.assertEqual(data["columns_excluded"], ["Proto-Toda-Truku", "Proto-Truku"])

    def test_no_notifications_after_success(self):
        data = self.client.get("/notifications").json()
        self.assertEqual(data["notifications"], [])
        self.assertEqual(data["last_id"], 0)

    def test_websocket_session(self):
        with self.client.websocket_connect("/ws") as ws:
            initial = ws.receive_json()
            self.assertEqual(initial["row_count"], 3)

            # A burst of edits yields one snapshot for the last edit
            ws.send_json({"type": "search", "filters": {"1": "s"}})
            ws.send_json({"type": "search", "filters": {"1": "st"}})
            searched = ws.receive_json()
            self.assertEqual(searched["filters"], {"1": "st"})
            self.assertEqual(searched["rows"], [["*hulis", "stone", "Tgdaya hulis"]])

            ws.send_json({"type": "sort", "column": 0})
            sorted_state = ws.receive_json()
            self.assertEqual(sorted_state["sort"], {"column": 0, "direction": "asc"})
            self.assertEqual(sorted_state["row_count"], 1)

            ws.send_json({"type": "bogus"})
            error = ws.receive_json()
            self.assertEqual(error["type"], "error")

        # Websocket sessions do not touch the REST session
        self.assertIsNone(self.client.get("/view").json()["sort"])

    def test_websocket_rejects_binary_frames(self):
        with self.client.websocket_connect("/ws") as ws:
            ws.receive_json()

            ws.send_bytes(b"\x00\x01")
            error = ws.receive_json()
            self.assertEqual(error["type"], "error")

            # The connection is still usable afterwards
            ws.send_json({"type": "sort", "column": GLOSS})
            self.assertEqual(ws.receive_json()["sort"], {"column": GLOSS, "direction": "asc"})

    def test_websocket_close_with_pending_search(self):
        with self.client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "search", "filters": {"0": "q"}})

        # The dropped edit never reaches the shared session
        self.assertEqual(self.client.get("/view").json()["row_count"], 3)

class TestMissingDataAPI(APITestCase):

    csv_content = None

    def test_no_data_state(self):
        data = self.client.get("/view").json()
        self.assertFalse(data["loading"])
        self.assertFalse(data["loaded"])
        self.assertEqual(data["error"]["kind"], "load_error")
        self.assertEqual(data["rows"], [])

    def test_failure_is_notified(self):
        data = self.client.get("/notifications").json()
        self.assertEqual(len(data["notifications"]), 1)
        self.assertEqual(data["notifications"][0]["severity"], "error")
        self.assertEqual(data["last_id"], 1)

    def test_sort_and_stats_need_data(self):
        self.assertEqual(self.client.post("/sort/0").status_code, 409)
        self.assertEqual(self.client.get("/stats").status_code, 409)

class TestEmptyDataAPI(APITestCase):

    csv_content = ""

    def test_empty_file_state(self):
        data = self.client.get("/view").json()
        self.assertEqual(data["error"]["kind"], "empty_input")
        self.assertFalse(self.client.get("/health").json()["loaded"])

if __name__ == '__main__':
    unittest.main()
