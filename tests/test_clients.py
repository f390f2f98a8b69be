import pytest
import requests
import responses

from clients import FullTextClient, RecordApiClient
from exceptions import InvalidApiKeyError, RecordNotFoundError, RecordRetrieveError
from models import FullTextStatus

RECORD_URL = "https://records.test/record/v2/9200001/book_1.json"
ANNOPAGE_URL = "https://fulltext.test/presentation/9200001/book_1/annopage/1"


@responses.activate
def test_fetch_record(settings, book_record):
    responses.add(responses.GET, RECORD_URL, json=book_record, status=200)
    record = RecordApiClient(settings).fetch_record("/9200001/book_1", "secret")
    assert record["object"]["about"] == "/9200001/book_1"
    assert responses.calls[0].request.url == RECORD_URL + "?wskey=secret"


@responses.activate
def test_fetch_record_other_record_api(settings, book_record):
    responses.add(
        responses.GET, "https://other.test/record/v2/9200001/book_1.json", json=book_record
    )
    client = RecordApiClient(settings)
    record = client.fetch_record("/9200001/book_1", "secret", "https://other.test/")
    assert record["object"]["about"] == "/9200001/book_1"


@pytest.mark.parametrize(
    "status,error",
    [
        (401, InvalidApiKeyError),
        (404, RecordNotFoundError),
        (500, RecordRetrieveError),
        (503, RecordRetrieveError),
    ],
)
@responses.activate
def test_fetch_record_errors(settings, status, error):
    responses.add(responses.GET, RECORD_URL, json={"success": False}, status=status)
    with pytest.raises(error):
        RecordApiClient(settings).fetch_record("/9200001/book_1", "secret")


@responses.activate
def test_fetch_record_timeout_is_fatal(settings):
    responses.add(responses.GET, RECORD_URL, body=requests.exceptions.ReadTimeout("too slow"))
    with pytest.raises(RecordRetrieveError):
        RecordApiClient(settings).fetch_record("/9200001/book_1", "secret")


@responses.activate
def test_fetch_record_invalid_json(settings):
    responses.add(responses.GET, RECORD_URL, body="<html>not json</html>", status=200)
    with pytest.raises(RecordRetrieveError):
        RecordApiClient(settings).fetch_record("/9200001/book_1", "secret")


@responses.activate
def test_probe_exists(settings):
    responses.add(responses.HEAD, ANNOPAGE_URL, status=200)
    assert FullTextClient(settings).probe("/9200001/book_1", 1) == FullTextStatus.EXISTS


@responses.activate
def test_probe_not_exists(settings):
    responses.add(responses.HEAD, ANNOPAGE_URL, status=404)
    assert FullTextClient(settings).probe("/9200001/book_1", 1) == FullTextStatus.NOT_EXISTS


@responses.activate
def test_probe_other_status_is_unknown(settings):
    responses.add(responses.HEAD, ANNOPAGE_URL, status=502)
    assert FullTextClient(settings).probe("/9200001/book_1", 1) == FullTextStatus.UNKNOWN


@responses.activate
def test_probe_timeout_is_unknown(settings):
    responses.add(
        responses.HEAD, ANNOPAGE_URL, body=requests.exceptions.ConnectTimeout("no connection")
    )
    assert FullTextClient(settings).probe("/9200001/book_1", 1) == FullTextStatus.UNKNOWN


@responses.activate
def test_probe_other_full_text_api(settings):
    url = "https://ft.other.test/presentation/9200001/book_1/annopage/4"
    responses.add(responses.HEAD, url, status=200)
    status = FullTextClient(settings).probe("/9200001/book_1", 4, "https://ft.other.test")
    assert status == FullTextStatus.EXISTS
