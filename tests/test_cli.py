"""
Tests for the runner helpers and the parcelwalk command line.
"""

import pytest
import yaml

from conftest import make_invoice, make_parcel
from parcelwalk.cli import entrypoint
from parcelwalk.core.errors import ParcelwalkError
from parcelwalk.runner import resolve

INVOICE_YAML = """\
bindleVersion: 1.0.0
bindle:
  name: example.com/app
  version: 1.0.0
parcel:
  - label: {sha256: aaa, name: app.wasm, annotations: {wasm-runtime: wasmtime}}
    conditions: {requires: [db, web]}
  - label: {sha256: bbb, name: db.wasm}
    conditions: {memberOf: [db], requires: [cache]}
  - label: {sha256: ccc, name: web.wasm}
    conditions: {memberOf: [web], requires: [cache]}
  - label: {sha256: ddd, name: cache.wasm}
    conditions: {memberOf: [cache], requires: [web]}
"""


@pytest.fixture
def invoice_file(tmp_path):
    path = tmp_path / "invoice.yml"
    path.write_text(INVOICE_YAML)
    return str(path)


@pytest.fixture(autouse=True)
def quiet_entrypoint(monkeypatch):
    monkeypatch.setattr(entrypoint, "configure_logging", lambda level=None: None)
    monkeypatch.setattr(entrypoint.signal, "signal", lambda signum, handler: None)


# =============================================================================
# RUNNER
# =============================================================================

class TestResolveRunner:

    def test_obtain_requires_a_source(self):
        with pytest.raises(ParcelwalkError):
            resolve.obtain_invoice()

    def test_obtain_from_server(self):
        fetched = make_invoice(make_parcel("aaa"))

        class FakeClient:
            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def get_invoice(self, invoice_id):
                assert invoice_id == "example.com/app/1.0.0"
                return fetched

        class FakeConnection:
            def client(self):
                return FakeClient()

        invoice = resolve.obtain_invoice(invoice_id="example.com/app/1.0.0", connection=FakeConnection())
        assert invoice is fetched

    def test_unknown_seed(self):
        with pytest.raises(ParcelwalkError):
            resolve.run_requires(make_invoice(make_parcel("aaa")), "zzz")

    def test_render_plain(self):
        assert resolve.render([make_parcel("aaa", name="app.wasm")]) == "aaa  app.wasm"

    def test_render_yaml(self):
        parsed = yaml.safe_load(resolve.render([make_parcel("aaa", member_of=["db"])], as_yaml=True))
        assert parsed[0]["label"]["sha256"] == "aaa"
        assert parsed[0]["conditions"] == {"memberOf": ["db"]}

    def test_explain_lists_groups(self):
        invoice = make_invoice(make_parcel("a", requires=["db"]), make_parcel("b", member_of=["db"]))
        output = resolve.run_requires(invoice, "a", explain=True)
        assert output.splitlines() == ["# group: db", "b  b.wasm"]

    def test_explain_walks_once(self, monkeypatch):
        calls = []
        real = resolve.required_closure

        def counting(invoice, parcel):
            calls.append(parcel.sha256)
            return real(invoice, parcel)

        monkeypatch.setattr(resolve, "required_closure", counting)
        invoice = make_invoice(make_parcel("a", requires=["db"]), make_parcel("b", member_of=["db"]))
        resolve.run_requires(invoice, "a", explain=True)
        assert calls == ["a"]


# =============================================================================
# COMMAND LINE
# =============================================================================

class TestEntrypoint:

    def test_requires(self, invoice_file, capsys):
        assert entrypoint.main(["--file", invoice_file, "requires", "aaa"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["bbb  db.wasm", "ccc  web.wasm", "ddd  cache.wasm"]

    def test_members_of_empty_group(self, invoice_file, capsys):
        assert entrypoint.main(["--file", invoice_file, "members", "missing"]) == 0
        assert capsys.readouterr().out == ""

    def test_members(self, invoice_file, capsys):
        assert entrypoint.main(["--file", invoice_file, "members", "cache"]) == 0
        assert capsys.readouterr().out.strip() == "ddd  cache.wasm"

    def test_annotated_yaml(self, invoice_file, capsys):
        assert entrypoint.main(["--file", invoice_file, "--yaml", "annotated", "wasm-runtime"]) == 0
        parsed = yaml.safe_load(capsys.readouterr().out)
        assert [p["label"]["sha256"] for p in parsed] == ["aaa"]

    def test_unknown_parcel_exits_nonzero(self, invoice_file):
        assert entrypoint.main(["--file", invoice_file, "requires", "zzz"]) == 1

    def test_missing_file_exits_nonzero(self, tmp_path):
        assert entrypoint.main(["--file", str(tmp_path / "none.yml"), "requires", "aaa"]) == 1

    def test_source_is_required(self):
        with pytest.raises(SystemExit):
            entrypoint.main(["requires", "aaa"])

    def test_malformed_invoice_exits_nonzero(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("bindle: {name: app, version: 1}\nparcel:\n  - label: oops\n")
        assert entrypoint.main(["--file", str(path), "requires", "aaa"]) == 1

    def test_bad_server_url_exits_nonzero(self):
        assert entrypoint.main(["--invoice", "a/1", "--url", "not-a-url", "requires", "aaa"]) == 1
