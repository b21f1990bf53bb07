"""Tests for the in-memory session store and concurrent loading."""

from __future__ import annotations

import asyncio

import pytest

from conftest import chart
from models.common_models import ErrorCode, Table
from services import session_service


def _table(dataset_id: str, file_name: str = "t.csv") -> Table:
    return Table(dataset_id=dataset_id, file_name=file_name, headers=["Cat"], rows=[["A"]])


class TestTablesAndCharts:
    def test_unknown_session(self):
        with pytest.raises(KeyError):
            session_service.get_session("missing")

    def test_add_and_remove_table_cascades_charts(self):
        sid = session_service.create_session().session_id
        session_service.add_table(sid, _table("d1"))
        session_service.add_table(sid, _table("d2"))
        session_service.add_chart(sid, chart("Cat", dataset_id="d1"))
        kept = session_service.new_chart(sid, "d2", "Other", "pie", "Cat")

        session_service.remove_table(sid, "d1")

        assert [t.dataset_id for t in session_service.list_tables(sid)] == ["d2"]
        assert session_service.list_charts(sid) == [kept]

    def test_replacing_a_table_drops_its_charts(self):
        sid = session_service.create_session().session_id
        session_service.add_table(sid, _table("d1", "old.csv"))
        session_service.add_chart(sid, chart("Cat", dataset_id="d1"))

        session_service.add_table(sid, _table("d1", "new.csv"))

        assert session_service.get_table(sid, "d1").file_name == "new.csv"
        assert session_service.list_charts(sid) == []

    def test_chart_for_unknown_dataset_is_rejected(self):
        sid = session_service.create_session().session_id
        with pytest.raises(KeyError):
            session_service.add_chart(sid, chart("Cat", dataset_id="nope"))

    def test_remove_chart(self):
        sid = session_service.create_session().session_id
        session_service.add_table(sid, _table("d1"))
        spec = session_service.new_chart(sid, "d1", "C", "bar", "Cat")
        session_service.remove_chart(sid, spec.id)
        assert session_service.list_charts(sid) == []
        with pytest.raises(KeyError):
            session_service.remove_chart(sid, spec.id)

    def test_mutations_do_not_alter_previous_snapshots(self):
        sid = session_service.create_session().session_id
        session_service.add_table(sid, _table("d1"))
        snapshot = session_service.get_session(sid).tables
        session_service.add_table(sid, _table("d2"))
        assert list(snapshot) == ["d1"]


class TestLoading:
    def test_load_file_derives_default_charts(self, parts_usage_xlsx):
        sid = session_service.create_session().session_id
        table, charts = asyncio.run(session_service.load_file(sid, "Parts Usage Jan.xlsx", parts_usage_xlsx))
        assert table.headers[1] == "Area Usage"
        assert [c.name for c in charts] == ["Cost Part"]
        assert session_service.list_charts(sid, table.dataset_id) == charts

    def test_load_files_reports_each_file(self, pm_csv):
        sid = session_service.create_session().session_id
        uploads = [
            ("Preventive Maintenance Report.csv", pm_csv),
            ("broken.xlsx", b"not a workbook"),
            ("notes.txt", b"hello"),
            ("empty.csv", b""),
        ]
        results = asyncio.run(session_service.load_files(sid, uploads))

        assert [r.file_name for r in results] == [name for name, _ in uploads]
        assert results[0].error is None
        assert results[0].dataset.file_name == "Preventive Maintenance Report.csv"
        assert results[1].dataset is None and results[1].charts == []
        assert [c.name for c in results[0].charts] == ["Time Consume", "Activity"]
        assert results[1].error.code == ErrorCode.E_DECODE_SPREADSHEET
        assert results[2].error.code == ErrorCode.E_UNSUPPORTED_FILE_TYPE
        assert results[3].error.code == ErrorCode.E_EMPTY_FILE
        assert len(session_service.list_tables(sid)) == 1

    def test_failed_reload_keeps_previous_table(self, pm_csv):
        sid = session_service.create_session().session_id
        asyncio.run(session_service.load_file(sid, "Preventive Maintenance Report.csv", pm_csv, dataset_id="slot1"))
        charts_before = session_service.list_charts(sid)

        results = asyncio.run(session_service.load_files(sid, [("bad.xlsx", b"junk")], dataset_id="slot1"))

        assert results[0].error is not None
        assert session_service.get_table(sid, "slot1").file_name == "Preventive Maintenance Report.csv"
        assert session_service.list_charts(sid) == charts_before

    def test_fallback_chart_for_unrecognised_file(self):
        sid = session_service.create_session().session_id
        table, charts = asyncio.run(session_service.load_file(sid, "misc.csv", b"Name,Qty\nA,1\n"))
        assert [(c.name, c.x_column) for c in charts] == [("Data Distribution", "Name")]

    def test_single_dataset_mode(self):
        sid = session_service.create_session().session_id
        _, charts = asyncio.run(
            session_service.load_file(sid, "misc.csv", b"Name,Qty\nA,1\n", include_fallback=False)
        )
        assert charts == []

    def test_oversized_upload_is_rejected(self, monkeypatch):
        monkeypatch.setattr(session_service, "MAX_UPLOAD_BYTES", 4)
        sid = session_service.create_session().session_id
        results = asyncio.run(session_service.load_files(sid, [("big.csv", b"A,B\n1,2\n")]))
        assert results[0].error.code == ErrorCode.E_FILE_TOO_LARGE
        assert session_service.list_tables(sid) == []

    def test_upload_to_missing_session_reports_unknown_session(self):
        results = asyncio.run(session_service.load_files("missing", [("a.csv", b"A\n1\n")]))
        assert results[0].error.code == ErrorCode.E_UNKNOWN_SESSION
