"""Household data model: entities, the owned data store and member lookup."""

import copy
import math
import uuid
from dataclasses import dataclass, field

from futureflow.params import SimulationSettings, expect_dict, expect_list

RECURRING_INTERVALS = (1, 2, 3, 4, 5, 10, 15, 20)
RECURRING_CATEGORIES = ("vehicle", "housing", "insurance", "education", "other")

CATEGORY_LABELS = {
    "vehicle": "車両",
    "housing": "住宅",
    "insurance": "保険",
    "education": "教育",
    "other": "その他",
}


def generate_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Account:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, raw: dict) -> "Account":
        return cls(id=raw["id"], name=raw["name"])


@dataclass
class FamilyMember:
    """Family member. The first member of a roster is the household head."""

    id: str
    name: str
    age: int
    birth_month: int = 1

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "age": self.age, "birthMonth": self.birth_month}

    @classmethod
    def from_dict(cls, raw: dict) -> "FamilyMember":
        return cls(
            id=raw["id"], name=raw["name"], age=raw["age"],
            birth_month=raw.get("birthMonth", 1),
        )


@dataclass
class RecurringExpense:
    """Multi-year expense (車検, 更新料, ...) due in start_ym's month every interval_years.

    category None marks an untagged legacy record.
    """

    id: str
    name: str
    amount: int
    interval_years: int
    start_ym: str
    category: str | None = None

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS.get(self.category or "other", CATEGORY_LABELS["other"])

    def to_dict(self) -> dict:
        raw = {
            "id": self.id, "name": self.name, "amount": self.amount,
            "intervalYears": self.interval_years, "startYM": self.start_ym,
        }
        if self.category is not None:
            raw["category"] = self.category
        return raw

    @classmethod
    def from_dict(cls, raw: dict) -> "RecurringExpense":
        return cls(
            id=raw["id"], name=raw["name"], amount=raw["amount"],
            interval_years=raw["intervalYears"], start_ym=raw["startYM"],
            category=raw.get("category"),
        )


@dataclass
class Loan:
    """Fixed monthly payment over [start_ym, end_ym] (both inclusive)."""

    id: str
    name: str
    monthly_amount: int
    start_ym: str
    end_ym: str

    def is_active(self, ym: str) -> bool:
        return self.start_ym <= ym <= self.end_ym

    def to_dict(self) -> dict:
        return {
            "id": self.id, "name": self.name, "monthlyAmount": self.monthly_amount,
            "startYM": self.start_ym, "endYM": self.end_ym,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Loan":
        return cls(
            id=raw["id"], name=raw["name"], monthly_amount=raw["monthlyAmount"],
            start_ym=raw["startYM"], end_ym=raw["endYM"],
        )


@dataclass
class FutureEvent:
    """One-off expense in the month a member reaches target_age (target_month)."""

    id: str
    name: str
    amount: int
    family_id: str
    target_age: int
    target_month: int

    def to_dict(self) -> dict:
        return {
            "id": self.id, "name": self.name, "amount": self.amount,
            "familyId": self.family_id, "targetAge": self.target_age,
            "targetMonth": self.target_month,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "FutureEvent":
        return cls(
            id=raw["id"], name=raw["name"], amount=raw["amount"],
            family_id=raw["familyId"], target_age=raw["targetAge"],
            target_month=raw["targetMonth"],
        )


@dataclass
class MonthlyBalance:
    month: str
    total: float
    accounts: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"month": self.month, "total": self.total, "accounts": dict(self.accounts)}

    @classmethod
    def from_dict(cls, raw: dict) -> "MonthlyBalance":
        raw = expect_dict(raw, "monthlyBalances[]")
        accounts = expect_dict(raw.get("accounts") or {}, "monthlyBalances[].accounts")
        return cls(month=raw["month"], total=raw["total"], accounts=dict(accounts))


def parse_account_amounts(month: str, values: dict[str, str]) -> MonthlyBalance:
    """Build a MonthlyBalance from raw per-account input. Raises ValueError on bad input.

    Empty input counts as 0; total is the sum of the account amounts.
    """
    if not month:
        raise ValueError("入力月を選択してください")
    accounts: dict[str, float] = {}
    for account_id, raw in values.items():
        text = str(raw).strip()
        try:
            amount = float(text) if text else 0.0
        except ValueError:
            raise ValueError(f"残高は数値で入力してください（{account_id}: {raw!r}）") from None
        if math.isnan(amount) or math.isinf(amount):
            raise ValueError(f"残高は数値で入力してください（{account_id}: {raw!r}）")
        if amount.is_integer():
            amount = int(amount)
        accounts[account_id] = amount
    return MonthlyBalance(month=month, total=sum(accounts.values()), accounts=accounts)


@dataclass(frozen=True)
class Found:
    member: FamilyMember


@dataclass(frozen=True)
class Missing:
    member_id: str


def find_member(members: list[FamilyMember], member_id: str) -> Found | Missing:
    """Resolve a family reference. Callers skip Missing (dangling id) silently."""
    for member in members:
        if member.id == member_id:
            return Found(member)
    return Missing(member_id)


@dataclass(frozen=True)
class Scenario:
    """Named deep copy of the plan inputs, used for comparison lines."""

    id: str
    name: str
    settings: SimulationSettings
    families: tuple[FamilyMember, ...]
    loans: tuple[Loan, ...]
    recurring: tuple[RecurringExpense, ...]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "settings": self.settings.to_dict(),
            "families": [f.to_dict() for f in self.families],
            "loans": [loan.to_dict() for loan in self.loans],
            "recurring": [e.to_dict() for e in self.recurring],
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Scenario":
        raw = expect_dict(raw, "scenarios[]")
        return cls(
            id=raw["id"],
            name=raw["name"],
            settings=SimulationSettings.from_dict(raw.get("settings") or {}),
            families=tuple(FamilyMember.from_dict(f) for f in expect_list(raw.get("families") or [], "scenarios[].families")),
            loans=tuple(Loan.from_dict(x) for x in expect_list(raw.get("loans") or [], "scenarios[].loans")),
            recurring=tuple(
                RecurringExpense.from_dict(x) for x in expect_list(raw.get("recurring") or [], "scenarios[].recurring")
            ),
        )


# collection name → AppData attribute (names follow the exported JSON document)
COLLECTIONS = {
    "accounts": "accounts",
    "families": "families",
    "recurringExpenses": "recurring_expenses",
    "loans": "loans",
    "futureEvents": "future_events",
    "scenarios": "scenarios",
}


@dataclass
class AppData:
    """The household data store. The projection engine reads it and never mutates it."""

    accounts: list[Account] = field(default_factory=list)
    families: list[FamilyMember] = field(default_factory=list)
    recurring_expenses: list[RecurringExpense] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)
    future_events: list[FutureEvent] = field(default_factory=list)
    monthly_balances: list[MonthlyBalance] = field(default_factory=list)
    settings: SimulationSettings = field(default_factory=SimulationSettings)
    scenarios: list[Scenario] = field(default_factory=list)

    def add_account(self, name: str, account_id: str | None = None) -> Account:
        account = Account(id=account_id or generate_id(), name=name)
        self.accounts.append(account)
        return account

    def add_family(
        self, name: str, age: int, birth_month: int = 1, member_id: str | None = None,
    ) -> FamilyMember:
        member = FamilyMember(id=member_id or generate_id(), name=name, age=age, birth_month=birth_month)
        self.families.append(member)
        return member

    def add_recurring(
        self, name: str, amount: int, interval_years: int, start_ym: str,
        category: str | None = "other", expense_id: str | None = None,
    ) -> RecurringExpense:
        expense = RecurringExpense(
            id=expense_id or generate_id(), name=name, amount=amount,
            interval_years=interval_years, start_ym=start_ym, category=category,
        )
        self.recurring_expenses.append(expense)
        return expense

    def add_loan(
        self, name: str, monthly_amount: int, start_ym: str, end_ym: str,
        loan_id: str | None = None,
    ) -> Loan:
        loan = Loan(
            id=loan_id or generate_id(), name=name, monthly_amount=monthly_amount,
            start_ym=start_ym, end_ym=end_ym,
        )
        self.loans.append(loan)
        return loan

    def add_event(
        self, name: str, amount: int, family_id: str, target_age: int, target_month: int,
        event_id: str | None = None,
    ) -> FutureEvent:
        event = FutureEvent(
            id=event_id or generate_id(), name=name, amount=amount, family_id=family_id,
            target_age=target_age, target_month=target_month,
        )
        self.future_events.append(event)
        return event

    def upsert_balance(self, balance: MonthlyBalance) -> bool:
        """Insert or overwrite the balance for its month. Returns True if it replaced one."""
        replaced = False
        for i, existing in enumerate(self.monthly_balances):
            if existing.month == balance.month:
                self.monthly_balances[i] = balance
                replaced = True
                break
        if not replaced:
            self.monthly_balances.append(balance)
        self.monthly_balances.sort(key=lambda b: b.month)
        return replaced

    def sorted_balances(self) -> list[MonthlyBalance]:
        return sorted(self.monthly_balances, key=lambda b: b.month)

    def latest_balance(self) -> MonthlyBalance | None:
        balances = self.sorted_balances()
        return balances[-1] if balances else None

    def delete(self, collection: str, item_id: str) -> bool:
        """Remove an item by id. Returns True if something was removed."""
        if collection == "monthlyBalances":
            return self.delete_balance(item_id)
        attr = COLLECTIONS[collection]
        items = getattr(self, attr)
        kept = [item for item in items if item.id != item_id]
        setattr(self, attr, kept)
        return len(kept) != len(items)

    def delete_balance(self, month: str) -> bool:
        before = len(self.monthly_balances)
        self.monthly_balances = [b for b in self.monthly_balances if b.month != month]
        return len(self.monthly_balances) != before

    def copy(self) -> "AppData":
        return copy.deepcopy(self)
