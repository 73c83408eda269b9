"""
================================================================================
Docs Tools
================================================================================

Infrastructure utilities shared by the docs end-to-end suite.

Modules:
    - common: Configuration loading and logging setup
    - report_tools: Allure attachments and result summaries

Example:
    from docs_tools.common import init_logger
    from docs_tools.report_tools.allure_utils import AllureReportProcessor

    init_logger()
    processor = AllureReportProcessor(Path("reports/allure-results"))
    processor.write_results_json(Path("reports/results.json"))

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
