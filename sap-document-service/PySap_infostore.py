"""Service that walks SAP BI repository folders"""
import logging
from typing import Dict, List, Optional, Union
from PySap_exceptions import AuthError, ParseError, SapError
from PySap_session import get_headers, parse_json, sap_get
from PySap_webi import MatchRecord, as_list, inspect_report

logger = logging.getLogger(__name__)

WEBI_TYPE = 'Webi'


def get_folder_children(base_url: str, token: str, folder_id: Union[str, int],
                        timeout: Optional[float] = None) -> List[dict]:
    """List the direct children of a repository folder.
    :param base_url: SAP BI RESTful root
    :param token: SAP token
    :param folder_id: SAP folder id
    :return: Folder entries, each with at least 'id' and 'type'"""

    url = f"{base_url}/infostore/{folder_id}/children"
    body = parse_json(sap_get(url, get_headers(token), timeout), url)

    if not isinstance(body, dict):
        raise ParseError(f"Unexpected listing for folder {folder_id}", url)

    entries = as_list(body.get('entries'))
    for entry in entries:
        if not isinstance(entry, dict) or 'id' not in entry or 'type' not in entry:
            raise ParseError(f"Folder entry without id or type: {entry}", url)
    return entries


def walk_folder(base_url: str, folder_id: Union[str, int], token: str, object_names: List[str],
                skip_failed: bool = False, failures: Optional[Dict[str, SapError]] = None,
                timeout: Optional[float] = None) -> List[MatchRecord]:
    """Inspect every Webi document directly inside a folder.

    Sub-folders are not visited. Reports are inspected one after the other, in
    listing order. By default the first failing report aborts the scan; with
    skip_failed the error is logged, stored in failures and the scan goes on,
    except for AuthError which always aborts.

    :param base_url: SAP BI RESTful root
    :param folder_id: SAP folder id
    :param token: SAP token
    :param object_names: Result object names to look for
    :param skip_failed: Keep scanning when a report cannot be inspected
    :param failures: Optional dict receiving report id -> error for skipped reports
    :return: Match records of all reports, in report order"""

    entries = get_folder_children(base_url, token, folder_id, timeout)
    reports = [entry for entry in entries if entry['type'] == WEBI_TYPE]
    logger.info(f"Folder {folder_id}: {len(reports)} Webi document(s) out of {len(entries)} entries")

    records = []
    for report in reports:
        report_id = str(report['id'])
        try:
            records.extend(inspect_report(base_url, report_id, token, object_names, timeout))
        except SapError as e:
            if not skip_failed or isinstance(e, AuthError):
                raise
            logger.warning(f"Skipping report {report_id}: {e}")
            if failures is not None:
                failures[report_id] = e

    logger.info(f"Folder {folder_id}: {len(records)} match(es) found")
    return records
