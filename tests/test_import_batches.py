from __future__ import annotations

import json
import math

import pytest

from errors import AuthError, TransportError
from fakes import FakeResponse, FakeSession
from models import Company
from pipelines.runner import Pipeline, RunContext
from pipelines.steps.declare_collection import DeclareCollection
from pipelines.steps.decode_rows import DecodeRows
from pipelines.steps.import_batches import ImportBatches
from services.dead_letter import DeadLetterWriter
from services.index_client import IndexClient
from sources.companies import COMPANY_LAYOUT


def _client(session, **kwargs):
    return IndexClient("http://index.local", "secret", session=session, sleep=lambda s: None, **kwargs)


def _companies(n):
    return [Company(cvr=1000 + i, name=f"Company {i}") for i in range(n)]


@pytest.mark.parametrize("total,batch", [(5, 2), (4, 2), (1, 200), (7, 3), (0, 5)])
def test_issues_ceil_b_over_k_calls(fake_session, total, batch):
    ctx = RunContext(records=iter(_companies(total)))
    ctx = ImportBatches(_client(fake_session), "companies", batch_size=batch).run(ctx)
    sizes = fake_session.import_sizes()
    assert len(sizes) == math.ceil(total / batch)
    assert all(s <= batch for s in sizes)
    assert sum(sizes) == total
    assert ctx.meta["report"].documents_imported == total


def test_running_totals_after_each_flush(fake_session):
    totals = []
    ImportBatches(_client(fake_session), "companies", batch_size=2, on_progress=totals.append).run(
        RunContext(records=iter(_companies(5)))
    )
    assert fake_session.import_sizes() == [2, 2, 1]
    assert totals == [2, 4, 5]


def test_buffer_holds_at_most_one_batch(fake_session):
    pulled = []

    def gen():
        for c in _companies(5):
            pulled.append(c.cvr)
            # Every full batch before this record has already been flushed
            assert sum(fake_session.import_sizes()) == ((len(pulled) - 1) // 2) * 2
            yield c

    ImportBatches(_client(fake_session), "companies", batch_size=2).run(RunContext(records=gen()))
    assert len(pulled) == 5


def test_failed_batch_is_dead_lettered_and_run_continues(tmp_path):
    calls = {"n": 0}

    def handler(method, url, kw):
        calls["n"] += 1
        if calls["n"] == 2:
            return FakeResponse(500, "boom")
        lines = kw["data"].decode("utf-8").splitlines()
        return FakeResponse(200, "\n".join('{"success":true}' for _ in lines))

    dl_path = tmp_path / "dead" / "letters.ndjson"
    totals = []
    step = ImportBatches(
        _client(FakeSession(handler), max_retries=0),
        "companies",
        batch_size=2,
        dead_letter=DeadLetterWriter(str(dl_path)),
        on_progress=totals.append,
    )
    report = step.run(RunContext(records=iter(_companies(5)))).meta["report"]
    assert report.batches_sent == 3
    assert report.batches_failed == 1
    assert report.documents_imported == 3
    assert report.partial is True
    assert totals == [2, 3]
    entries = [json.loads(l) for l in dl_path.read_text(encoding="utf-8").splitlines()]
    assert [e["document"]["cvr"] for e in entries] == [1002, 1003]
    assert all(e["batch"] == 2 for e in entries)
    assert report.dead_lettered == 2


def test_rejected_documents_are_counted():
    def handler(method, url, kw):
        return FakeResponse(200, '{"success":false,"error":"bad"}\n{"success":true}')

    report = ImportBatches(_client(FakeSession(handler)), "companies", batch_size=2).run(
        RunContext(records=iter(_companies(2)))
    ).meta["report"]
    assert report.documents_imported == 1
    assert report.documents_rejected == 1
    assert report.dead_lettered == 0


def test_auth_failure_aborts():
    session = FakeSession(lambda m, u, kw: FakeResponse(403, "nope"))
    with pytest.raises(AuthError):
        ImportBatches(_client(session), "companies", batch_size=2).run(RunContext(records=iter(_companies(3))))
    assert len(session.calls) == 1


def test_schema_declared_before_any_record_is_read(fake_session):
    order = []

    class _Source:
        def __iter__(self):
            order.append("read")
            yield "10200345,Acme A/S"

    original = fake_session.handler

    def handler(method, url, kw):
        order.append("declare" if url.endswith("/collections") else "import")
        return original(method, url, kw)

    fake_session.handler = handler
    client = _client(fake_session)
    ctx = Pipeline([
        DecodeRows(COMPANY_LAYOUT),
        DeclareCollection(client, COMPANY_LAYOUT.collection_schema("companies")),
        ImportBatches(client, "companies", batch_size=10),
    ]).run(RunContext(source=_Source()))
    assert order == ["declare", "read", "import"]
    assert ctx.meta["collection_created"] is True
    assert ctx.meta["report"].records_decoded == 1


def test_failed_batch_without_dead_letter_aborts():
    def handler(method, url, kw):
        return FakeResponse(400, '{"message":"bad document"}')

    session = FakeSession(handler)
    with pytest.raises(TransportError) as exc:
        ImportBatches(_client(session), "companies", batch_size=2).run(RunContext(records=iter(_companies(5))))
    assert exc.value.status_code == 400
    assert len(session.import_calls()) == 1
