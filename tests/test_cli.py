"""CLI harness tests: status and history commands against a temp state dir (no network)."""
import pytest

from page_summariser.cli import main
from page_summariser.llm.registry import FREE_MODELS
from page_summariser.settings import SummariserSettings
from page_summariser.state.filestore import LocalJsonFileStore
from page_summariser.state.history import HistoryStore


@pytest.fixture(autouse=True)
def _state_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SUMMARISER_STATE_DIR", str(tmp_path))
    monkeypatch.delenv("SUMMARISER_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_status_reports_all_models_available(capsys) -> None:
    assert main(["status"]) == 0
    out = capsys.readouterr().out
    assert f"{len(FREE_MODELS)}/{len(FREE_MODELS)} free models available" in out
    assert FREE_MODELS[0] in out


def test_summarize_requires_api_key(tmp_path, capsys) -> None:
    page = tmp_path / "page.txt"
    page.write_text("Some page text.", encoding="utf-8")
    assert main(["summarize", str(page)]) == 1
    assert "API key is required" in capsys.readouterr().err


def test_history_list_show_delete_clear(_state_dir, capsys) -> None:
    store = HistoryStore(LocalJsonFileStore(_state_dir))
    entry = store.add(summary="• saved point", text="page text", title="Saved Page", url="https://example.org/x")

    assert main(["history", "list"]) == 0
    assert entry.id in capsys.readouterr().out

    assert main(["history", "show", entry.id]) == 0
    assert "• saved point" in capsys.readouterr().out

    assert main(["history", "delete", "nope"]) == 1
    assert main(["history", "delete", entry.id]) == 0
    capsys.readouterr()

    assert main(["history", "clear"]) == 0
    assert "cleared 0 entries" in capsys.readouterr().out


def test_settings_reject_empty_model_list() -> None:
    with pytest.raises(ValueError):
        SummariserSettings(_env_file=None, free_models=[" "])


def test_history_export_writes_text_file(_state_dir, capsys) -> None:
    store = HistoryStore(LocalJsonFileStore(_state_dir))
    entry = store.add(summary="• exported point", text="page text", title='Q3: "Results" / Review', url="https://example.org/q3")

    assert main(["history", "export", entry.id]) == 0
    out_file = _state_dir / "Q3_Results_Review.txt"
    content = out_file.read_text(encoding="utf-8")
    assert content.startswith("Page Summary\n" + "=" * 50 + "\n")
    assert 'Title: Q3: "Results" / Review' in content
    assert "URL: https://example.org/q3" in content
    assert content.rstrip().endswith("• exported point")
    assert str(out_file.name) in capsys.readouterr().out

    custom = _state_dir / "custom.txt"
    assert main(["history", "export", entry.id, "--out", str(custom)]) == 0
    assert custom.read_text(encoding="utf-8") == content

    assert main(["history", "export", "nope"]) == 1
