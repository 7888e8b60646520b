import pytest
import requests

from cadastro.forms.submission import FormSubmitter, FormSubmitterConfig, SubmissionError


class DummyResponse:
    def __init__(self, payload=None, status_code=201):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if self._payload is None:
            raise ValueError("empty body")
        return self._payload


class DummySession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_submit_posts_flat_mapping():
    session = DummySession(DummyResponse({"status": "ok"}))
    submitter = FormSubmitter(FormSubmitterConfig(url="http://api.local/cadastro", timeout=4), session=session)

    assert submitter.submit({"cpf": "111.444.777-35"}) == {"status": "ok"}
    assert session.calls == [("http://api.local/cadastro", {"cpf": "111.444.777-35"}, 4)]


def test_submit_tolerates_empty_body():
    submitter = FormSubmitter(session=DummySession(DummyResponse(None, status_code=204)))
    assert submitter.submit({}) == {}


def test_rejected_submission_raises_with_status():
    submitter = FormSubmitter(session=DummySession(DummyResponse({"errors": {}}, status_code=422)))
    with pytest.raises(SubmissionError) as excinfo:
        submitter.submit({})
    assert excinfo.value.status_code == 422


def test_network_failure_raises():
    submitter = FormSubmitter(session=DummySession(error=requests.Timeout("slow")))
    with pytest.raises(SubmissionError) as excinfo:
        submitter.submit({})
    assert excinfo.value.status_code is None
