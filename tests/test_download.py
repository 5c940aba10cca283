"""
Tests for the Socrata crash download
"""

from datetime import date

import pandas as pd
import pytest
import requests

from data_engineering.download import download_chicago_crashes as dl
from data_engineering.download import (
    build_where_clause,
    download_crashes,
    lookback_start,
    resource_url,
    save_raw_crashes
)




class FakeResponse:

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f'{self.status_code} Server Error')

    def json(self):
        return self.payload


class FakeSession:
    """Stands in for requests.Session; serves `$limit`/`$offset` pages of `records`"""

    def __init__(self, records=None, status_code=200, error=None):
        self.records = records or []
        self.status_code = status_code
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'headers': headers})
        if self.error:
            raise self.error
        start = params['$offset']
        return FakeResponse(self.records[start:start + params['$limit']], self.status_code)

    def close(self):
        self.closed = True


RECORDS = [
    {'crash_record_id': 'a1', 'crash_date': '2024-05-01T10:15:00.000', 'injuries_total': '0'},
    {'crash_record_id': 'b2', 'crash_date': '2024-04-30T08:00:00.000', 'injuries_total': '1'},
    {'crash_record_id': 'c3', 'crash_date': '2024-04-29T22:40:00.000', 'injuries_total': '0'},
]


def test_lookback_start_same_calendar_day():
    assert lookback_start(2, today=date(2024, 5, 15)) == date(2022, 5, 15)


def test_lookback_start_leap_day_falls_back_to_feb_28():
    assert lookback_start(1, today=date(2024, 2, 29)) == date(2023, 2, 28)
    assert lookback_start(4, today=date(2024, 2, 29)) == date(2020, 2, 29)


def test_lookback_start_rejects_non_positive_window():
    with pytest.raises(ValueError):
        lookback_start(0, today=date(2024, 5, 15))


def test_build_where_clause():
    clause = build_where_clause(2, today=date(2024, 5, 15))
    assert clause == "crash_date > '2022-05-15T00:00:00'"


def test_resource_url():
    assert resource_url() == 'https://data.cityofchicago.org/resource/85ca-t3if.json'


def test_download_pages_through_everything():
    session = FakeSession(RECORDS)

    df = download_crashes(session=session, page_size=2, verbose=False)

    assert len(df) == 3
    assert list(df['crash_record_id']) == ['a1', 'b2', 'c3']

    assert [call['params']['$offset'] for call in session.calls] == [0, 2]
    params = session.calls[0]['params']
    assert session.calls[0]['url'].endswith('/resource/85ca-t3if.json')
    assert params['$where'].startswith("crash_date > '")
    assert params['$order'] == 'crash_date DESC'
    assert params['$limit'] == 2
    assert session.calls[0]['headers'] == {}

    # Caller-supplied sessions are left open
    assert not session.closed


def test_download_full_last_page_requests_one_more():
    session = FakeSession(RECORDS[:2])

    df = download_crashes(session=session, page_size=2, verbose=False)

    assert len(df) == 2
    assert [call['params']['$offset'] for call in session.calls] == [0, 2]


def test_download_with_limit():
    session = FakeSession(RECORDS)

    df = download_crashes(session=session, limit=2, verbose=False)

    assert len(df) == 2
    assert len(session.calls) == 1
    assert session.calls[0]['params']['$limit'] == 2


def test_download_sends_app_token():
    session = FakeSession(RECORDS)
    download_crashes(session=session, app_token='secret', verbose=False)
    assert session.calls[0]['headers'] == {'X-App-Token': 'secret'}


def test_download_empty_result():
    df = download_crashes(session=FakeSession([]), verbose=False)
    assert df.empty


def test_download_http_error_propagates():
    with pytest.raises(requests.exceptions.HTTPError):
        download_crashes(session=FakeSession(RECORDS, status_code=503), verbose=False)


def test_download_errors_propagate_and_session_is_closed(monkeypatch):
    session = FakeSession(error=requests.exceptions.ConnectionError('unreachable'))
    monkeypatch.setattr(dl.requests, 'Session', lambda: session)

    with pytest.raises(requests.exceptions.ConnectionError):
        download_crashes(verbose=False)

    assert session.closed


def test_save_raw_crashes_writes_timestamped_and_latest(tmp_path):
    df = pd.DataFrame.from_records(RECORDS)

    filepath = save_raw_crashes(df, tmp_path, years_back=2)

    assert filepath.name.startswith('chicago_crashes_2y_')
    assert (tmp_path / 'chicago_crashes_latest.csv').exists()
    assert len(pd.read_csv(filepath)) == 3


def test_main_no_save(monkeypatch):
    session = FakeSession(RECORDS)
    monkeypatch.setattr(dl.requests, 'Session', lambda: session)

    assert dl.main(['--limit', '10', '--no-save', '--quiet']) == 0
    assert session.closed


def test_main_fails_when_nothing_downloaded(monkeypatch):
    monkeypatch.setattr(dl.requests, 'Session', lambda: FakeSession([]))

    assert dl.main(['--no-save', '--quiet']) == 1
