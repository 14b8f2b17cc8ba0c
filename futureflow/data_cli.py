"""CLI entry point for editing the household data store."""

import argparse
import sys
from datetime import date
from pathlib import Path

from futureflow.config import SETTING_KEYS, add_setting_args, apply_overrides, load_config, resolve_data_path
from futureflow.core_balance import suggest_investment_monthly
from futureflow.formatting import format_currency
from futureflow.models import (
    COLLECTIONS,
    RECURRING_CATEGORIES,
    RECURRING_INTERVALS,
    AppData,
    FamilyMember,
    Found,
    find_member,
    parse_account_amounts,
)
from futureflow.params import IncomePlan, validate_settings
from futureflow.scenarios import delete_scenario, save_scenario
from futureflow.storage import (
    DEFAULT_DATA_PATH,
    clear_data,
    export_data,
    export_filename,
    import_data,
    load_data,
    save_data,
)
from futureflow.yearmonth import format_date_to_ym, parse_year_month


def _year_month(text: str) -> str:
    """argparse type for YYYY-MM (normalized to zero-padded month)."""
    try:
        return format_date_to_ym(parse_year_month(text))
    except ValueError:
        raise argparse.ArgumentTypeError(f"年月は YYYY-MM 形式で指定してください: {text!r}") from None


def _resolve_member(data: AppData, ref: str) -> FamilyMember:
    """Find a family member by id, then by name. Raises ValueError if absent."""
    lookup = find_member(data.families, ref)
    if isinstance(lookup, Found):
        return lookup.member
    for member in data.families:
        if member.name == ref:
            return member
    raise ValueError(f"家族が見つかりません: {ref}")


def _resolve_account_id(data: AppData, ref: str) -> str:
    for account in data.accounts:
        if ref in (account.id, account.name):
            return account.id
    raise ValueError(f"口座が見つかりません: {ref}")


def _parse_amount_pairs(data: AppData, pairs: list[str]) -> dict[str, str]:
    """["銀行=100000", ...] → {account_id: "100000"}. Unlisted accounts count as empty."""
    values = {account.id: "" for account in data.accounts}
    for pair in pairs:
        ref, sep, raw = pair.partition("=")
        if not sep:
            raise ValueError(f"口座残高は 口座=金額 の形式で指定してください: {pair!r}")
        values[_resolve_account_id(data, ref.strip())] = raw
    return values


def cmd_export(data: AppData, args) -> AppData | None:
    text = export_data(data)
    if args.output is None:
        print(text)
        return None
    path = args.output
    if path.is_dir():
        path = path / export_filename(args.today)
    path.write_text(text, encoding="utf-8")
    print(f"エクスポートしました: {path}", file=sys.stderr)
    return None


def cmd_import(data: AppData, args) -> AppData | None:
    text = args.file.read_text(encoding="utf-8")
    imported = import_data(text, current=data)
    print("データのインポートが完了しました", file=sys.stderr)
    return imported


def cmd_add_balance(data: AppData, args) -> AppData | None:
    balance = parse_account_amounts(args.month, _parse_amount_pairs(data, args.amount))
    replaced = data.upsert_balance(balance)
    action = "上書き" if replaced else "追加"
    print(f"{balance.month} の残高を{action}しました（総資産 {format_currency(balance.total)}）")
    return data


def cmd_add_account(data: AppData, args) -> AppData | None:
    account = data.add_account(args.name)
    print(f"口座を追加しました: {account.name} ({account.id})")
    return data


def cmd_add_family(data: AppData, args) -> AppData | None:
    member = data.add_family(args.name, args.age, birth_month=args.birth_month)
    print(f"家族を追加しました: {member.name} {member.age}歳 ({member.id})")
    return data


def cmd_add_recurring(data: AppData, args) -> AppData | None:
    expense = data.add_recurring(
        args.name, args.amount, args.interval, args.start, category=args.category,
    )
    print(
        f"定期支出を追加しました: {expense.name} {format_currency(expense.amount)}"
        f" / {expense.interval_years}年ごと（{expense.category_label}）"
    )
    return data


def cmd_add_loan(data: AppData, args) -> AppData | None:
    if args.end < args.start:
        raise ValueError(f"終了年月は開始年月以降にしてください（{args.start} 〜 {args.end}）")
    loan = data.add_loan(args.name, args.monthly, args.start, args.end)
    print(f"ローンを追加しました: {loan.name} {format_currency(loan.monthly_amount)}/月 ({loan.start_ym}〜{loan.end_ym})")
    return data


def cmd_add_event(data: AppData, args) -> AppData | None:
    member = _resolve_member(data, args.member)
    event = data.add_event(args.name, args.amount, member.id, args.age, args.month)
    print(f"イベントを追加しました: {event.name}（{member.name} {event.target_age}歳 {event.target_month}月）")
    return data


def cmd_set_income(data: AppData, args) -> AppData | None:
    member = _resolve_member(data, args.member)
    data.settings.family_incomes[member.id] = IncomePlan(
        monthly=args.monthly,
        bonus=args.bonus,
        retirement_age=args.retirement_age,
        severance=args.severance,
        pension=args.pension,
    )
    print(f"{member.name} の収入プランを設定しました")
    return data


def cmd_set_settings(data: AppData, args) -> AppData | None:
    resolved = {key: getattr(args, key) for key in SETTING_KEYS if getattr(args, key) is not None}
    if not resolved:
        raise ValueError("変更する設定を1つ以上指定してください")
    updated = apply_overrides(data.settings, resolved)
    errors = validate_settings(updated)
    if errors:
        raise ValueError("\n".join(errors))
    data.settings = updated
    print("設定を保存しました")
    return data


def cmd_save_scenario(data: AppData, args) -> AppData | None:
    scenario = save_scenario(data, args.name)
    print(f"シナリオ「{scenario.name}」を保存しました ({scenario.id})")
    return data


def cmd_delete(data: AppData, args) -> AppData | None:
    if args.collection == "scenarios":
        removed = delete_scenario(data, args.id)
    else:
        removed = data.delete(args.collection, args.id)
    if not removed:
        raise ValueError(f"{args.collection} に {args.id} は存在しません")
    print(f"削除しました: {args.collection} {args.id}")
    return data


def cmd_suggest_investment(data: AppData, args) -> AppData | None:
    suggestion, surplus = suggest_investment_monthly(data, args.today)
    print(f"毎月の余剰: {format_currency(surplus)}")
    print(f"推奨積立額: {format_currency(suggestion)}/月（余剰の50%）")
    if args.apply:
        data.settings.investment_monthly = suggestion
        print("推奨額を積立額に設定しました")
        return data
    return None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FutureFlow 家計データ編集")
    parser.add_argument("--config", type=Path, default=None, help="設定ファイルパス (default: config.toml)")
    parser.add_argument("--data", type=Path, default=None, help=f"家計データJSON (default: {DEFAULT_DATA_PATH})")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="基準日 YYYY-MM-DD (default: 今日)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("export", help="JSONをエクスポート")
    p.add_argument("--output", type=Path, default=None, help="出力先（ディレクトリなら FutureFlow_export_日付.json）")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("import", help="JSONをインポート（現在のデータを置き換え）")
    p.add_argument("file", type=Path)
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("add-balance", help="月次残高を記録（同じ月は上書き）")
    p.add_argument("month", type=_year_month)
    p.add_argument("amount", nargs="*", help="口座=金額（口座はIDまたは名前）")
    p.set_defaults(func=cmd_add_balance)

    p = sub.add_parser("add-account", help="口座を追加")
    p.add_argument("name")
    p.set_defaults(func=cmd_add_account)

    p = sub.add_parser("add-family", help="家族を追加（最初の1人が世帯主）")
    p.add_argument("name")
    p.add_argument("age", type=int)
    p.add_argument("--birth-month", type=int, default=1, choices=range(1, 13))
    p.set_defaults(func=cmd_add_family)

    p = sub.add_parser("add-recurring", help="定期支出を追加")
    p.add_argument("name")
    p.add_argument("amount", type=int)
    p.add_argument("--interval", type=int, default=1, choices=RECURRING_INTERVALS, help="周期（年）")
    p.add_argument("--start", type=_year_month, required=True, help="開始年月 YYYY-MM")
    p.add_argument("--category", choices=RECURRING_CATEGORIES, default="other")
    p.set_defaults(func=cmd_add_recurring)

    p = sub.add_parser("add-loan", help="ローンを追加")
    p.add_argument("name")
    p.add_argument("monthly", type=int, help="月額返済（円）")
    p.add_argument("--start", type=_year_month, required=True)
    p.add_argument("--end", type=_year_month, required=True)
    p.set_defaults(func=cmd_add_loan)

    p = sub.add_parser("add-event", help="将来の一時支出を追加")
    p.add_argument("name")
    p.add_argument("amount", type=int)
    p.add_argument("--member", required=True, help="対象の家族（IDまたは名前）")
    p.add_argument("--age", type=int, required=True, help="対象者の年齢")
    p.add_argument("--month", type=int, default=1, choices=range(1, 13))
    p.set_defaults(func=cmd_add_event)

    p = sub.add_parser("set-income", help="家族の収入プランを設定")
    p.add_argument("member", help="家族（IDまたは名前）")
    p.add_argument("--monthly", type=int, default=0, help="月額手取り")
    p.add_argument("--bonus", type=int, default=0, help="年間ボーナス")
    p.add_argument("--retirement-age", type=int, default=60)
    p.add_argument("--severance", type=int, default=0, help="退職金")
    p.add_argument("--pension", type=int, default=0, help="年金月額")
    p.set_defaults(func=cmd_set_income)

    p = sub.add_parser("set-settings", help="シミュレーション設定を保存")
    add_setting_args(p)
    p.set_defaults(func=cmd_set_settings)

    p = sub.add_parser("save-scenario", help="現在の設定をシナリオとして保存")
    p.add_argument("name")
    p.set_defaults(func=cmd_save_scenario)

    p = sub.add_parser("delete", help="項目を削除（monthlyBalances は年月で指定）")
    p.add_argument("collection", choices=[*COLLECTIONS, "monthlyBalances"])
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("suggest-investment", help="収支から積立額を提案")
    p.add_argument("--apply", action="store_true", help="提案額を設定に反映")
    p.set_defaults(func=cmd_suggest_investment)

    p = sub.add_parser("clear", help="全データを削除")
    p.add_argument("--yes", action="store_true", help="確認なしで削除")
    p.set_defaults(func=None)

    return parser


def main(argv: list[str] | None = None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)
    path = resolve_data_path(args, config)

    if args.command == "clear":
        if not args.yes:
            print("全データを削除するには --yes を指定してください", file=sys.stderr)
            raise SystemExit(1)
        clear_data(path)
        print(f"データをリセットしました: {path}")
        return

    data, warnings = load_data(path)
    for w in warnings:
        print(w, file=sys.stderr)

    try:
        updated = args.func(data, args)
    except (ValueError, OSError) as e:
        print(e, file=sys.stderr)
        raise SystemExit(1)

    if updated is not None:
        for w in save_data(updated, path):
            print(w, file=sys.stderr)


if __name__ == "__main__":
    main()
