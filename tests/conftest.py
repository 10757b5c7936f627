"""Shared fixtures for the dashboard tests."""

import pytest

from business_records import parse_businesses
from position_store import MemoryStore

FOUR_ROWS_CSV = """site_url,business_name,industry,company_name,city,phone_number
https://a.example,Alpha Dental,Dental,Alpha Dental LLC,Portland,5035550142
https://b.example,Beta Roofing,Construction,Beta Roofing Co,Boise,208-555-0199
,Gamma Bakery,Food,Gamma Bakery Inc,Madison,6085550110
https://d.example,Delta Dental,Dental,Delta Dental PC,Eugene,
"""


@pytest.fixture
def four_rows_csv():
    return FOUR_ROWS_CSV


@pytest.fixture
def records():
    return parse_businesses(FOUR_ROWS_CSV).records


@pytest.fixture
def storage():
    return MemoryStore()


@pytest.fixture
def url_params():
    return MemoryStore()
