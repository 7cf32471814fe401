"""Shared fixtures: a small statement covering three months."""

import io

import pytest

from account_explorer.records import read_records

STATEMENT_CSV = """Date,Description,Cr,Dr,Balance
2021-01-15,ITUNES STORE 123,0,9.99,990.01
2021-01-20,SALARY ACME LTD,2000,,2990.01
2021-02-01,GOOGLE PLAY APPS,0,4.99,2985.02
2021-02-14,TESCO STORES 2041,,35.50,2949.52
2021-03-03,ITUNES STORE 456,0,0.99,2948.53
2021-03-20,SALARY ACME LTD,2000,0,4948.53
2021-03-21,REFUND ITUNES STORE,1.50,0,4950.03
"""


@pytest.fixture
def statement_csv():
    return STATEMENT_CSV


@pytest.fixture
def records():
    return read_records(io.StringIO(STATEMENT_CSV))
