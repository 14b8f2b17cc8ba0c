"""JSON persistence and export/import of the household data store."""

import json
from datetime import date
from pathlib import Path

from futureflow.models import (
    Account,
    AppData,
    FamilyMember,
    FutureEvent,
    Loan,
    MonthlyBalance,
    RecurringExpense,
    Scenario,
)
from futureflow.params import SimulationSettings, expect_dict, expect_list

APP_DATA_KEY = "futureflow_app_data_v1"
DEFAULT_DATA_PATH = Path(f"{APP_DATA_KEY}.json")

# インポート時に必須のトップレベルキー
REQUIRED_IMPORT_KEYS = ("accounts", "families")


class ImportValidationError(ValueError):
    """Imported document is unreadable or lacks required collections."""


def default_app_data() -> AppData:
    return AppData()


def to_document(data: AppData) -> dict:
    """Encode the store as the exported JSON document (camelCase keys)."""
    return {
        "accounts": [a.to_dict() for a in data.accounts],
        "families": [f.to_dict() for f in data.families],
        "recurringExpenses": [e.to_dict() for e in data.recurring_expenses],
        "loans": [loan.to_dict() for loan in data.loans],
        "futureEvents": [e.to_dict() for e in data.future_events],
        "monthlyBalances": [b.to_dict() for b in data.monthly_balances],
        "settings": data.settings.to_dict(),
        "scenarios": [s.to_dict() for s in data.scenarios],
    }


def _collection(doc: dict, key: str) -> list:
    return expect_list(doc.get(key) or [], key)


def from_document(doc: dict) -> AppData:
    """Decode a JSON document. Missing collections decode as empty.

    Raises ValueError when a collection or the settings block has the wrong shape.
    """
    doc = expect_dict(doc, "document")
    balances = [MonthlyBalance.from_dict(b) for b in _collection(doc, "monthlyBalances")]
    balances.sort(key=lambda b: b.month)
    return AppData(
        accounts=[Account.from_dict(a) for a in _collection(doc, "accounts")],
        families=[FamilyMember.from_dict(f) for f in _collection(doc, "families")],
        recurring_expenses=[RecurringExpense.from_dict(e) for e in _collection(doc, "recurringExpenses")],
        loans=[Loan.from_dict(x) for x in _collection(doc, "loans")],
        future_events=[FutureEvent.from_dict(e) for e in _collection(doc, "futureEvents")],
        monthly_balances=balances,
        settings=SimulationSettings.from_dict(doc.get("settings") or {}),
        scenarios=[Scenario.from_dict(s) for s in _collection(doc, "scenarios")],
    )


def _merge_onto(base: dict, loaded: dict) -> dict:
    """Shallow merge: top-level keys of loaded replace those of base."""
    return {**base, **loaded}


def load_data(path: Path | None = None) -> tuple[AppData, list[str]]:
    """Load the store from disk. Returns (data, warnings).

    A missing file yields defaults without warnings; an unreadable or malformed
    file yields defaults and a warning.
    """
    if path is None:
        path = DEFAULT_DATA_PATH
    if not path.exists():
        return default_app_data(), []
    try:
        with open(path, encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError("トップレベルがオブジェクトではありません")
        merged = _merge_onto(to_document(default_app_data()), loaded)
        return from_document(merged), []
    except (OSError, ValueError, KeyError, TypeError) as e:
        return default_app_data(), [
            f"データのロードエラー: {path}: {e}（保存されたデータの形式に問題があるため、初期データで開始します）"
        ]


def save_data(data: AppData, path: Path | None = None) -> list[str]:
    """Write the store to disk. Returns warnings (empty on success)."""
    if path is None:
        path = DEFAULT_DATA_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(export_data(data))
    except OSError as e:
        return [f"データの保存エラー: {path}: {e}（ストレージを確認してください）"]
    return []


def export_data(data: AppData) -> str:
    return json.dumps(to_document(data), ensure_ascii=False, indent=2)


def export_filename(today: date | None = None) -> str:
    if today is None:
        today = date.today()
    return f"FutureFlow_export_{today.isoformat()}.json"


def import_data(text: str, current: AppData | None = None) -> AppData:
    """Parse an exported document and return the replacement store.

    Raises ImportValidationError if the text is not JSON or lacks accounts/families.
    `current` is never modified.
    """
    try:
        imported = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportValidationError(f"ファイルの読み込みまたは解析に失敗しました: {e}") from e
    if not isinstance(imported, dict) or any(
        not isinstance(imported.get(key), list) for key in REQUIRED_IMPORT_KEYS
    ):
        raise ImportValidationError("JSONファイルの構造が不正です（accounts / families が必要です）")
    base = to_document(current if current is not None else default_app_data())
    try:
        return from_document(_merge_onto(base, imported))
    except (KeyError, TypeError, ValueError) as e:
        raise ImportValidationError(f"JSONファイルの構造が不正です: {e}") from e


def clear_data(path: Path | None = None) -> AppData:
    """Delete the stored file and return a fresh store."""
    if path is None:
        path = DEFAULT_DATA_PATH
    path.unlink(missing_ok=True)
    return default_app_data()
