"""In-memory stand-in for the SAP BI RESTful endpoints, used by the tests"""
import requests
from unittest.mock import MagicMock

BASE_URL = "http://bi.example.com:6405/biprws"


def build_specification(*result_object_names: str) -> str:
    """Build a query specification declaring the given result objects."""
    result_objects = "".join(
        f'<resultObjects identifier="DS0.DO{index}" name="{name}"/>'
        for index, name in enumerate(result_object_names)
    )
    return (
        '<queryspec:QuerySpec xmlns:queryspec="http://com.sap.sb.rebean.queryspec" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" dataProviderId="DP0">'
        '<queryTree xsi:type="queryspec:QueryDataNode">'
        '<children xsi:type="queryspec:QueryDataNode">'
        f'<query>{result_objects}</query>'
        '</children>'
        '</queryTree>'
        '</queryspec:QuerySpec>'
    )


def json_response(data, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data
    return response


def text_response(text: str, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


def error_response(status_code: int, text: str = "error") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


class FakeSap:
    """Answers requests.get / requests.post calls like a small SAP BI server."""

    def __init__(self, token: str = "token-123"):
        self.token = token
        self.documents = {}
        self.folders = {}
        self.calls = []

    def add_document(self, report_id: str, path: str, name: str, dataproviders=()):
        """dataproviders: iterable of (id, name, specification_xml)."""
        self.documents[str(report_id)] = {
            'path': path,
            'name': name,
            'dataproviders': list(dataproviders),
        }

    def add_folder(self, folder_id: str, entries):
        self.folders[str(folder_id)] = list(entries)

    def post(self, url, headers=None, timeout=None, json=None):
        self.calls.append(('POST', url, headers))
        path = url[len(BASE_URL):]
        if path == '/logon/long':
            return json_response({'logonToken': self.token})
        if path == '/logoff':
            return text_response('')
        return error_response(404)

    def get(self, url, headers=None, timeout=None):
        self.calls.append(('GET', url, headers))
        if (headers or {}).get('X-SAP-LogonToken') != self.token:
            return error_response(401, "invalid token")

        parts = url[len(BASE_URL):].strip('/').split('/')
        if parts[0] == 'infostore' and len(parts) == 3 and parts[2] == 'children':
            if parts[1] not in self.folders:
                return error_response(404)
            return json_response({'entries': self.folders[parts[1]]})

        if parts[:2] != ['raylight', 'v1'] or len(parts) < 4 or parts[3] not in self.documents:
            return error_response(404)
        document = self.documents[parts[3]]

        if len(parts) == 4:
            return json_response({'document': {'id': parts[3], 'path': document['path'], 'name': document['name']}})
        if len(parts) == 5 and parts[4] == 'dataproviders':
            return json_response({'dataproviders': {'dataprovider': [
                {'id': dp_id, 'name': dp_name} for dp_id, dp_name, _ in document['dataproviders']
            ]}})
        if len(parts) == 7 and parts[6] == 'specification':
            for dp_id, _, specification in document['dataproviders']:
                if dp_id == parts[5]:
                    return text_response(specification)
        return error_response(404)

    def urls(self, method: str = 'GET'):
        return [url for call_method, url, _ in self.calls if call_method == method]
