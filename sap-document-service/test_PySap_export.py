import os
import tempfile
import unittest
import pandas as pd
from PySap_export import MATCH_COLUMNS, export_matches, matches_to_dataframe
from PySap_webi import MatchRecord


class TestPySapExport(unittest.TestCase):

    records = [
        MatchRecord("Public Folders/Finance", "Margins", "Query 1", "Revenue"),
        MatchRecord("Public Folders/Finance", "Margins", "Query 2", "Revenue"),
    ]

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.addCleanup(self.directory.cleanup)



    def test_dataframe_columns(self):
        df = matches_to_dataframe(self.records)
        self.assertEqual(list(df.columns), MATCH_COLUMNS)
        self.assertEqual(df['Data Provider'].tolist(), ["Query 1", "Query 2"])



    def test_empty_dataframe_keeps_columns(self):
        df = matches_to_dataframe([])
        self.assertEqual(list(df.columns), MATCH_COLUMNS)
        self.assertTrue(df.empty)



    def test_export_excel(self):
        file_path = os.path.join(self.directory.name, "reports", "usage.xlsx")
        self.assertEqual(export_matches(self.records, file_path), file_path)

        df = pd.read_excel(file_path, sheet_name='Matches', engine='openpyxl')
        self.assertEqual(list(df.columns), MATCH_COLUMNS)
        self.assertEqual(len(df), 2)



    def test_export_csv(self):
        file_path = os.path.join(self.directory.name, "usage.csv")
        export_matches(self.records, file_path)

        df = pd.read_csv(file_path, encoding='utf-8-sig')
        self.assertEqual(df['Report Name'].tolist(), ["Margins", "Margins"])



    def test_export_unknown_format(self):
        with self.assertRaises(ValueError):
            export_matches(self.records, os.path.join(self.directory.name, "usage.json"))



if __name__ == '__main__':
    unittest.main()
