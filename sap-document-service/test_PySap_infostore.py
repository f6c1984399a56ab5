import unittest
from unittest.mock import patch
from fake_sap import BASE_URL, FakeSap, build_specification, json_response
from PySap_exceptions import AuthError, NotFoundError, ParseError
from PySap_infostore import get_folder_children, walk_folder
from PySap_webi import MatchRecord


class TestPySapInfostore(unittest.TestCase):

    token = "token-123"

    def setUp(self):
        self.sap = FakeSap(self.token)
        patcher = patch('requests.get', side_effect=self.sap.get)
        patcher.start()
        self.addCleanup(patcher.stop)



    def test_get_folder_children(self):
        entries = [{'id': 1, 'type': 'Webi', 'name': 'Sales'}, {'id': 2, 'type': 'Folder', 'name': 'Archive'}]
        self.sap.add_folder("123456", entries)
        self.assertEqual(get_folder_children(BASE_URL, self.token, "123456"), entries)
        self.assertEqual(self.sap.urls(), [f"{BASE_URL}/infostore/123456/children"])



    @patch('requests.get')
    def test_get_folder_children_single_entry(self, mock_get):
        mock_get.return_value = json_response({'entries': {'id': 1, 'type': 'Webi'}})
        self.assertEqual(get_folder_children(BASE_URL, self.token, "1"), [{'id': 1, 'type': 'Webi'}])



    @patch('requests.get')
    def test_get_folder_children_entry_without_type(self, mock_get):
        mock_get.return_value = json_response({'entries': [{'id': 1}]})
        with self.assertRaises(ParseError):
            get_folder_children(BASE_URL, self.token, "1")



    def test_unknown_folder(self):
        with self.assertRaises(NotFoundError):
            walk_folder(BASE_URL, "999", self.token, ["Revenue"])



    def test_only_webi_entries_are_inspected(self):
        self.sap.add_folder("123456", [
            {'id': "1", 'type': "Webi"},
            {'id': "2", 'type': "Crystal"},
            {'id': "3", 'type': "webi"},
            {'id': "4", 'type': "Folder"},
        ])
        self.sap.add_document("1", "Public Folders/Sales", "Revenue", [("DP1", "DP1", build_specification("Revenue"))])

        records = walk_folder(BASE_URL, "123456", self.token, ["Revenue"])

        self.assertEqual(records, [MatchRecord("Public Folders/Sales", "Revenue", "DP1", "Revenue")])
        for url in self.sap.urls():
            self.assertNotIn("/documents/2", url)
            self.assertNotIn("/documents/3", url)
            self.assertNotIn("/documents/4", url)



    def test_report_order_follows_listing(self):
        self.sap.add_folder("10", [{'id': 7, 'type': "Webi"}, {'id': 3, 'type': "Webi"}])
        self.sap.add_document("7", "Public Folders", "Seven", [("DP0", "Q7", build_specification("Revenue"))])
        self.sap.add_document("3", "Public Folders", "Three", [("DP0", "Q3", build_specification("Revenue"))])

        records = walk_folder(BASE_URL, "10", self.token, ["Revenue"])

        self.assertEqual([record.report_name for record in records], ["Seven", "Three"])



    def test_failing_report_aborts_by_default(self):
        self.sap.add_folder("10", [{'id': 1, 'type': "Webi"}, {'id': 2, 'type': "Webi"}])
        self.sap.add_document("2", "Public Folders", "Two", [("DP0", "Q", build_specification("Revenue"))])

        with self.assertRaises(NotFoundError):
            walk_folder(BASE_URL, "10", self.token, ["Revenue"])
        self.assertFalse(any("/documents/2" in url for url in self.sap.urls()))



    def test_failing_report_skipped(self):
        self.sap.add_folder("10", [{'id': 1, 'type': "Webi"}, {'id': 2, 'type': "Webi"}])
        self.sap.add_document("2", "Public Folders", "Two", [("DP0", "Q", build_specification("Revenue"))])
        failures = {}

        records = walk_folder(BASE_URL, "10", self.token, ["Revenue"], skip_failed=True, failures=failures)

        self.assertEqual(records, [MatchRecord("Public Folders", "Two", "Q", "Revenue")])
        self.assertEqual(list(failures), ["1"])
        self.assertIsInstance(failures["1"], NotFoundError)



    @patch('PySap_infostore.inspect_report')
    @patch('PySap_infostore.get_folder_children')
    def test_auth_error_is_never_skipped(self, mock_children, mock_inspect):
        mock_children.return_value = [{'id': 1, 'type': "Webi"}, {'id': 2, 'type': "Webi"}]
        mock_inspect.side_effect = AuthError("token expired")

        with self.assertRaises(AuthError):
            walk_folder(BASE_URL, "10", self.token, ["Revenue"], skip_failed=True)
        self.assertEqual(mock_inspect.call_count, 1)



if __name__ == '__main__':
    unittest.main()
