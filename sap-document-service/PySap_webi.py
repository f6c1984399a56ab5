"""Service that inspects Web Intelligence documents for business object usage"""
import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, NamedTuple, Optional, Union
from PySap_exceptions import ParseError
from PySap_session import get_headers, parse_json, sap_get

logger = logging.getLogger(__name__)


class MatchRecord(NamedTuple):
    """One requested object found in one data provider of one report."""
    report_path: str
    report_name: str
    data_provider: str
    object_name: str


def get_webi_url(base_url: str) -> str:
    return f"{base_url}/raylight/v1"


def as_list(value: Union[list, dict, None]) -> list:
    """Raylight returns a bare object instead of a one-element list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def get_document(base_url: str, token: str, report_id: Union[str, int],
                 timeout: Optional[float] = None) -> Dict[str, str]:
    """Retrieve Webi document metadata.
    :param base_url: SAP BI RESTful root
    :param token: SAP token
    :param report_id: SAP document id
    :return: Dict with 'path' and 'name'"""

    url = f"{get_webi_url(base_url)}/documents/{report_id}"
    body = parse_json(sap_get(url, get_headers(token), timeout), url)

    try:
        document = body['document']
        return {'path': document['path'], 'name': document['name']}
    except (KeyError, TypeError) as e:
        raise ParseError(f"Document {report_id} response is missing {e}", url) from e


def get_dataproviders(base_url: str, token: str, report_id: Union[str, int],
                      timeout: Optional[float] = None) -> List[Dict[str, str]]:
    """Retrieve the data providers of a Webi document.
    :param base_url: SAP BI RESTful root
    :param token: SAP token
    :param report_id: SAP document id
    :return: List of dicts with 'id' and 'name'"""

    url = f"{get_webi_url(base_url)}/documents/{report_id}/dataproviders"
    body = parse_json(sap_get(url, get_headers(token), timeout), url)

    if not isinstance(body, dict):
        raise ParseError(f"Unexpected data provider list for document {report_id}", url)

    container = body.get('dataproviders') or {}
    if not isinstance(container, dict):
        raise ParseError(f"Unexpected data provider list for document {report_id}", url)

    dataproviders = []
    for dataprovider in as_list(container.get('dataprovider')):
        try:
            dataproviders.append({'id': dataprovider['id'], 'name': dataprovider['name']})
        except (KeyError, TypeError) as e:
            raise ParseError(f"Data provider entry is missing {e}", url) from e
    return dataproviders


def get_specification(base_url: str, token: str, report_id: Union[str, int],
                      dataprovider_id: str, timeout: Optional[float] = None) -> str:
    """Retrieve the query specification of a data provider.
    :return: Specification as XML text"""

    url = f"{get_webi_url(base_url)}/documents/{report_id}/dataproviders/{dataprovider_id}/specification"
    return sap_get(url, get_headers(token, content_type='xml'), timeout).text


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _result_object_name(element: ET.Element) -> str:
    name = element.get('name')
    if name is None:
        for child in element:
            if _local_name(child.tag) == 'name':
                name = child.text
                break
    if name is None:
        raise ParseError("Result object without a name")
    return name


def _collect_result_objects(node: ET.Element, names: List[str]) -> None:
    for child in node:
        tag = _local_name(child.tag)
        if tag == 'children':
            _collect_result_objects(child, names)
        elif tag == 'query':
            for result_object in child:
                if _local_name(result_object.tag) == 'resultObjects':
                    names.append(_result_object_name(result_object))


def find_result_objects(specification_xml: str) -> List[str]:
    """List the result object names declared in a query specification.

    Walks queryTree -> children -> query -> resultObjects, following nested
    children of combined queries, and returns names in document order.
    Namespace prefixes are ignored.

    :param specification_xml: XML returned by the specification endpoint
    :return: Result object names, duplicates kept"""

    try:
        root = ET.fromstring(specification_xml)
    except ET.ParseError as e:
        raise ParseError(f"Invalid specification XML: {e}") from e

    query_tree = None
    for element in root.iter():
        if _local_name(element.tag) == 'queryTree':
            query_tree = element
            break
    if query_tree is None:
        raise ParseError("Specification has no queryTree")

    names = []
    _collect_result_objects(query_tree, names)
    return names


def match_objects(result_object_names: List[str], object_names: List[str]) -> List[str]:
    """Exact, case sensitive matching. One entry per occurrence, in requested order."""
    matches = []
    for object_name in object_names:
        matches.extend(name for name in result_object_names if name == object_name)
    return matches


def inspect_report(base_url: str, report_id: Union[str, int], token: str, object_names: List[str],
                   timeout: Optional[float] = None) -> List[MatchRecord]:
    """Find the requested business objects in every data provider of a report.
    :param base_url: SAP BI RESTful root
    :param report_id: SAP document id
    :param token: SAP token
    :param object_names: Result object names to look for
    :return: Match records in data provider, requested name, occurrence order"""

    document = get_document(base_url, token, report_id, timeout)
    dataproviders = get_dataproviders(base_url, token, report_id, timeout)
    logger.info(f"Inspecting {document['path']}/{document['name']}: {len(dataproviders)} data provider(s)")

    records = []
    for dataprovider in dataproviders:
        specification = get_specification(base_url, token, report_id, dataprovider['id'], timeout)
        result_objects = find_result_objects(specification)

        for object_name in match_objects(result_objects, object_names):
            records.append(MatchRecord(document['path'], document['name'], dataprovider['name'], object_name))

    logger.debug(f"Report {report_id}: {len(records)} match(es)")
    return records
