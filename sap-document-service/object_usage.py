"""Find which Webi documents of a folder use given business objects"""
import logging
import sys
from typing import List, Optional
from PySap_config import SapConfig, configure_logging
from PySap_exceptions import SapError
from PySap_export import export_matches
from PySap_infostore import walk_folder
from PySap_session import get_token, logoff
from PySap_webi import MatchRecord

logger = logging.getLogger(__name__)

USAGE = """Usage:
  python object_usage.py                          # Use SAP_FOLDER_ID and SAP_OBJECT_NAMES
  python object_usage.py FOLDER_ID NAME [NAME...] # Scan FOLDER_ID for the given objects
  python object_usage.py --help                   # Show this help

Environment:
  SAP_BASE_URL, SAP_USERNAME, SAP_PASSWORD (required)
  SAP_AUTH_TYPE, SAP_OUTPUT_FILE, SAP_TIMEOUT, SAP_SKIP_FAILED, SAP_LOG_LEVEL (optional)"""


def find_object_usage(config: SapConfig) -> List[MatchRecord]:
    """Log on, scan the configured folder, log off.

    Logoff is attempted exactly once with the logon token, whether or not the
    scan succeeded. A failed logoff is only logged.

    :param config: Scan configuration
    :return: Match records for the whole folder"""

    token = get_token(config.base_url, config.username, config.password, config.auth_type, config.timeout)

    failures = {}
    try:
        records = walk_folder(
            config.base_url, config.folder_id, token, config.object_names,
            skip_failed=config.skip_failed, failures=failures, timeout=config.timeout,
        )
    finally:
        try:
            logoff(config.base_url, token, config.timeout)
        except SapError as e:
            logger.warning(f"Logoff failed, token may still be valid: {e}")

    if failures:
        logger.warning(f"{len(failures)} report(s) skipped: {', '.join(failures)}")

    if config.output_file:
        export_matches(records, config.output_file)

    return records


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if argv and argv[0] in ('--help', '-h'):
        print(USAGE)
        return 0

    configure_logging()

    try:
        if len(argv) >= 2:
            config = SapConfig.from_env(require_scan=False)
            config.folder_id = argv[0]
            config.object_names = argv[1:]
        elif argv:
            raise ValueError("Give a folder id and at least one object name")
        else:
            config = SapConfig.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print(USAGE)
        return 1

    try:
        records = find_object_usage(config)
    except SapError as e:
        logger.error(f"Object usage scan failed: {e}")
        return 1

    print(f"Folder {config.folder_id}: {len(records)} match(es) for {', '.join(config.object_names)}")
    for record in records:
        print(f"  {record.report_path}/{record.report_name} | {record.data_provider} | {record.object_name}")
    if config.output_file:
        print(f"Results saved at {config.output_file}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
