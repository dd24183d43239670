# services/change_log/report_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from services.exceptions import UpstreamError
from .models import RawChangeRecord, TimeWindow, iso


logger = logging.getLogger(__name__)

REPORT_PATH = "/api/v1/Reports/General/GlobalChangeLogReport/List"

# The report API uses int32 min as the "new filter" id.
NEW_FILTER_ID = -2147483648

CONDITION_EQUALS = 0
CONDITION_BETWEEN = 2
CONDITION_ON_OR_AFTER = 5

CHANGE_TYPE_INVENTORY = "2"

DISPLAYED_PROPERTIES = [
    "OrderId", "JobType", "BeginDate1", "BeginDate3_5", "ChangeBy", "EventDate",
    "Note", "ClientName", "JobTotal", "BalanceDue",
]

BODY_EXCERPT_CHARS = 200


def _between(field_id: str, window: TimeWindow) -> Dict[str, Any]:
    return {
        "id": NEW_FILTER_ID,
        "fieldId": field_id,
        "condition": CONDITION_BETWEEN,
        "criteria1": iso(window.start),
        "negate": False,
        "criteria2": iso(window.end),
    }


def _equals(field_id: str, criteria: str) -> Dict[str, Any]:
    return {"id": NEW_FILTER_ID, "fieldId": field_id, "condition": CONDITION_EQUALS, "criteria1": criteria}


class ReportClient:
    """
    Pages through the global change log report.

    Attributes:
        settings (ChangeLogSettings): base URL, page size, allow-lists and credentials.
        http_client: anything with a requests-compatible `post`; defaults to `requests`.
    """

    def __init__(self, settings, http_client=None):
        self.settings = settings
        self.http_client = http_client or requests
        self.url = f"{settings.api_base.rstrip('/')}{REPORT_PATH}"

    def build_filters(self, event_window: TimeWindow, prep_window: TimeWindow) -> List[Dict[str, Any]]:
        if self.settings.event_date_mode == "after":
            event_filter = {
                "id": NEW_FILTER_ID,
                "fieldId": "event_date",
                "condition": CONDITION_ON_OR_AFTER,
                "criteria1": iso(event_window.start),
                "negate": False,
            }
        else:
            event_filter = _between("event_date", event_window)

        filter_items = [event_filter, _equals("_ChangeType", CHANGE_TYPE_INVENTORY)]

        # Empty allow-lists mean "no restriction", so the filter is left out entirely
        if self.settings.office_ids:
            filter_items.append(_equals("office_id", ",".join(self.settings.office_ids)))
        if self.settings.job_type_ids:
            filter_items.append(_equals("job_type_id", ",".join(self.settings.job_type_ids)))

        filter_items.append(_between("begin_date1", prep_window))
        return filter_items

    def build_body(self, page_number: int, filter_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "pageNumber": page_number,
            "sortField": "",
            "sortAscending": True,
            "groupSortField": [],
            "groupSortAscending": True,
            "filterItems": filter_items,
            "displayedProperties": list(DISPLAYED_PROPERTIES),
            "recordCountPerPage": self.settings.page_size,
        }

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.auth_bearer:
            headers["Authorization"] = self.settings.auth_bearer
        if self.settings.auth_cookie:
            headers["Cookie"] = self.settings.auth_cookie
        return headers

    def fetch_page(self, page_number: int, filter_items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        POST one page request.

        Raises:
            UpstreamError: on a transport failure, a non-2xx status, or a body that is not a JSON page.
        """
        try:
            response = self.http_client.post(
                self.url,
                json=self.build_body(page_number, filter_items),
                headers=self._headers(),
                timeout=self.settings.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Report API request for page {page_number} failed: {e}")
            raise UpstreamError(f"Report API unreachable: {e}") from e

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:BODY_EXCERPT_CHARS]
            logger.error(f"Report API returned {response.status_code} for page {page_number}: {body}")
            raise UpstreamError(
                f"Report API {response.status_code} {response.reason or ''} - {body}".strip(),
                status=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as e:
            body = (response.text or "")[:BODY_EXCERPT_CHARS]
            logger.error(f"Report API page {page_number} was not JSON: {body}")
            raise UpstreamError("Report API returned a non-JSON response",
                                status=response.status_code, body=body) from e

        return self._check_page(page_number, response, data)

    def _check_page(self, page_number: int, response, data) -> Dict[str, Any]:
        """Normalize a page body to `items` (list of dicts) and an integer `totalPageCount` of at least 1."""
        problem = None
        items: List[Any] = []
        total_pages = 1
        if not isinstance(data, dict):
            problem = f"body is a {type(data).__name__}, not an object"
        else:
            items = data.get("items") or []
            if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                problem = "items is not a list of rows"
            try:
                # Missing or zero page counts mean a single page
                total_pages = max(int(data.get("totalPageCount") or 1), 1)
            except (TypeError, ValueError):
                problem = f"unreadable totalPageCount {data.get('totalPageCount')!r}"

        if problem:
            body = (response.text or "")[:BODY_EXCERPT_CHARS]
            logger.error(f"Report API page {page_number} had an unexpected shape ({problem}): {body}")
            raise UpstreamError("Report API returned an unexpected response",
                                status=response.status_code, body=body)
        return {"items": items, "totalPageCount": total_pages}

    def fetch_all(self, event_window: TimeWindow, prep_window: TimeWindow) -> List[RawChangeRecord]:
        """Fetch every page in order and return the concatenated rows."""
        filter_items = self.build_filters(event_window, prep_window)

        page = 1
        total_pages = 1
        all_items: List[Dict[str, Any]] = []
        while page <= total_pages:
            data = self.fetch_page(page, filter_items)
            total_pages = data["totalPageCount"]
            items = data["items"]
            all_items.extend(items)
            logger.info(f"Fetched change log page {page} of {total_pages} ({len(items)} rows)")
            page += 1

        return [RawChangeRecord.from_item(item) for item in all_items]
