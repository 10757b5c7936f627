"""
Business records for the cold calling dashboard
Loads CSV text, parses it into records and filters by industry
"""

import io
import csv
import logging
from dataclasses import dataclass, fields
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd
import requests

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Records
# -----------------------------------------------------------------------------
CSV_COLUMNS = ["site_url", "business_name", "industry", "company_name", "city", "phone_number"]

# A row survives parsing only if one of these has a value
CONTACT_FIELDS = ("business_name", "company_name", "site_url", "phone_number")

PREVIEW_HEADERS = {
    "business_name": "Business Name",
    "company_name": "Company",
    "industry": "Industry",
    "city": "City",
    "phone_number": "Phone",
    "site_url": "Website",
}

SAMPLE_CSV = """site_url,business_name,industry,company_name,city,phone_number
https://harborviewdental.example,Harborview Dental,Dental,Harborview Dental Group LLC,Portland,5035550142
https://summitroofing.example,Summit Roofing,Construction,Summit Roofing Co,Boise,(208) 555-0199
,Lakeside Bakery,Food & Beverage,Lakeside Bakery Inc,Madison,608-555-0110
https://brightpathlaw.example,Bright Path Law,Legal,Bright Path Legal PLLC,Tucson,
"""


@dataclass(frozen=True)
class BusinessRecord:
    site_url: str = ""
    business_name: str = ""
    industry: str = ""
    company_name: str = ""
    city: str = ""
    phone_number: str = ""

    def has_contact(self) -> bool:
        return any(getattr(self, name) for name in CONTACT_FIELDS)


@dataclass(frozen=True)
class ParseIssue:
    row: Optional[int]
    message: str


@dataclass(frozen=True)
class ParseResult:
    records: Tuple[BusinessRecord, ...]
    errors: Tuple[ParseIssue, ...] = ()

    @property
    def total(self) -> int:
        return len(self.records)


EMPTY_RESULT = ParseResult(records=())


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------
def fetch_csv_text(url: str, timeout: float = 15) -> str:
    """GET a CSV resource. Any failure gives back an empty string."""
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.text or ""
    except requests.exceptions.Timeout:
        logger.warning("Timed out fetching CSV from %s", url)
    except requests.exceptions.ConnectionError:
        logger.warning("Connection error fetching CSV from %s", url)
    except requests.exceptions.HTTPError as e:
        logger.warning("HTTP error fetching CSV from %s: %s", url, e)
    except requests.exceptions.RequestException as e:
        logger.warning("Request failed for %s: %s", url, e)
    return ""


def read_csv_file(path: str) -> str:
    try:
        with open(path, encoding="utf-8-sig") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.info("Could not read CSV file %s: %s", path, e)
        return ""


def load_csv_text(
    source: str,
    timeout: float = 15,
    is_current: Optional[Callable[[], bool]] = None,
    fallback: str = "",
) -> Optional[str]:
    """Load raw CSV text from a URL or a local path.

    ``is_current`` is checked once the load finishes; when it reports False the
    source was replaced in the meantime and None is returned so the caller
    leaves its current data alone. An empty or failed load falls back to
    ``fallback`` (empty by default).
    """
    source = (source or "").strip()
    text = ""
    if source.lower().startswith(("http://", "https://")):
        text = fetch_csv_text(source, timeout=timeout)
    elif source:
        text = read_csv_file(source)

    if is_current is not None and not is_current():
        logger.debug("Discarding stale CSV load for %s", source)
        return None

    if not text.strip():
        return fallback
    return text


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------
def _clean(value) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip()


def _scan_rows(text: str) -> Tuple[List[str], List[List[str]], List[ParseIssue]]:
    """Split CSV text into header and rows, fitting every row to the header.

    Uses the same ``csv.reader`` the pandas python engine reads with. Short
    rows are padded and long rows cut to the header width; both are kept and
    reported, so one bad row never shifts the columns of the others.
    """
    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    header = [h.strip() for h in next(reader, [])]
    width = len(header)
    rows: List[List[str]] = []
    issues: List[ParseIssue] = []

    for row in reader:
        if not any(field.strip() for field in row):
            continue
        if len(row) < width:
            issues.append(ParseIssue(
                row=reader.line_num,
                message=f"Too few fields: expected {width} fields but parsed {len(row)}",
            ))
            row = row + [""] * (width - len(row))
        elif len(row) > width:
            issues.append(ParseIssue(
                row=reader.line_num,
                message=f"Too many fields: expected {width} fields but parsed {len(row)}",
            ))
            row = row[:width]
        rows.append(row)
    return header, rows, issues


def parse_businesses(csv_text: str) -> ParseResult:
    """Parse CSV text with a header row into business records.

    Rows with the wrong number of fields are kept and reported in ``errors``;
    rows without any contact field are dropped silently.
    """
    text = (csv_text or "").lstrip("\ufeff").strip()
    if not text:
        return EMPTY_RESULT

    try:
        header, rows, issues = _scan_rows(text)
    except csv.Error as e:
        logger.warning("CSV parse failed: %s", e)
        return ParseResult(records=(), errors=(ParseIssue(row=None, message=str(e)),))

    df = pd.DataFrame(rows, columns=header, dtype=str)
    for col in CSV_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    records = []
    for row in df[CSV_COLUMNS].to_dict(orient="records"):
        record = BusinessRecord(**{name: _clean(row.get(name)) for name in CSV_COLUMNS})
        if record.has_contact():
            records.append(record)

    if issues:
        logger.info("Parsed %d businesses with %d issue(s)", len(records), len(issues))
    return ParseResult(records=tuple(records), errors=tuple(issues))


# -----------------------------------------------------------------------------
# Filtering
# -----------------------------------------------------------------------------
def list_industries(records: Sequence[BusinessRecord]) -> List[str]:
    return sorted({r.industry for r in records if r.industry})


def filter_by_industry(
    records: Sequence[BusinessRecord], industry: Optional[str]
) -> Tuple[BusinessRecord, ...]:
    if not industry:
        return tuple(records)
    return tuple(r for r in records if r.industry == industry)


def format_phone_number(phone: str) -> str:
    digits = "".join(ch for ch in phone if ch.isdigit())
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone


def preview_table(
    records: Sequence[BusinessRecord], max_rows: int = 100
) -> Tuple[pd.DataFrame, Optional[str]]:
    """First ``max_rows`` records as a display frame plus a truncation note."""
    shown = list(records[:max_rows])
    columns = list(PREVIEW_HEADERS.values())
    df = pd.DataFrame(
        [{PREVIEW_HEADERS[f.name]: getattr(r, f.name) or "—"
          for f in fields(BusinessRecord)} for r in shown],
        columns=columns,
    )
    note = None
    if len(records) > max_rows:
        note = f"Showing first {max_rows} of {len(records)} rows"
    return df, note
