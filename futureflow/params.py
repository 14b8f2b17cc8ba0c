"""Simulation settings and per-member income plans."""

from dataclasses import dataclass, field

# 予測期間の上限（100年）。設定年数に関わらずこの月数で打ち切る
MAX_PREDICTION_MONTHS = 1200
MIN_PREDICTION_YEARS = 1
MAX_PREDICTION_YEARS = 50  # 入力フォームでの上限

DEFAULT_RETIREMENT_AGE = 60

EDUCATION_MODES = ("public", "public_private_univ", "private")
UNIV_HOUSING_TYPES = ("home", "away")


def expect_dict(value, path: str) -> dict:
    if not isinstance(value, dict):
        raise ValueError(f"{path}: オブジェクトが必要です")
    return value


def expect_list(value, path: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"{path}: 配列が必要です")
    return value


@dataclass
class IncomePlan:
    """Income plan for one family member (円)."""

    monthly: int = 0       # 月額手取り
    bonus: int = 0         # 年間ボーナス（12ヶ月で平準化）
    retirement_age: int = DEFAULT_RETIREMENT_AGE
    severance: int = 0     # 退職金（退職年の1月に一括）
    pension: int = 0       # 年金月額

    def to_dict(self) -> dict:
        return {
            "monthly": self.monthly,
            "bonus": self.bonus,
            "retirementAge": self.retirement_age,
            "severance": self.severance,
            "pension": self.pension,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "IncomePlan":
        raw = expect_dict(raw, "familyIncomes")
        return cls(
            monthly=raw.get("monthly") or 0,
            bonus=raw.get("bonus") or 0,
            # 0/未設定は旧データ扱いで60歳
            retirement_age=raw.get("retirementAge") or DEFAULT_RETIREMENT_AGE,
            severance=raw.get("severance") or 0,
            pension=raw.get("pension") or 0,
        )


@dataclass
class SimulationSettings:

    prediction_years: int = 30
    family_incomes: dict[str, IncomePlan] = field(default_factory=dict)

    # Living cost (円/月): ローン・教育費・大型出費を除いた現在の生活費
    current_living_cost: int = 250000

    # Economic parameters (年%)
    inflation_rate: float = 1.0
    investment_monthly: int = 30000
    investment_yield: float = 4.0
    salary_increase_amount: int = 0  # 毎年の定期昇給額（月額）

    # Life plan parameters
    education_mode: str = "public"
    child_independence_age: int = 22
    cost_reduction_rate: float = 20  # 子供自立後の生活費削減率（%）
    license_return_age: int = 75     # 免許返納年齢（車両費停止）
    univ_housing_type: str = "home"
    univ_allowance: int = 100000     # 自宅外通学時の仕送り（月額）

    def horizon_months(self) -> int:
        return min(self.prediction_years * 12, MAX_PREDICTION_MONTHS)

    def to_dict(self) -> dict:
        return {
            "predictionYears": self.prediction_years,
            "familyIncomes": {k: v.to_dict() for k, v in self.family_incomes.items()},
            "currentLivingCost": self.current_living_cost,
            "inflationRate": self.inflation_rate,
            "investmentMonthly": self.investment_monthly,
            "investmentYield": self.investment_yield,
            "educationMode": self.education_mode,
            "childIndependenceAge": self.child_independence_age,
            "costReductionRate": self.cost_reduction_rate,
            "licenseReturnAge": self.license_return_age,
            "univHousingType": self.univ_housing_type,
            "univAllowance": self.univ_allowance,
            "salaryIncreaseAmount": self.salary_increase_amount,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "SimulationSettings":
        """Decode the stored settings block; absent or null keys keep their defaults."""
        raw = expect_dict(raw, "settings")
        d = cls()

        def get(key, default):
            value = raw.get(key)
            return default if value is None else value

        incomes = expect_dict(raw.get("familyIncomes") or {}, "settings.familyIncomes")
        return cls(
            prediction_years=get("predictionYears", d.prediction_years),
            family_incomes={k: IncomePlan.from_dict(v) for k, v in incomes.items()},
            current_living_cost=get("currentLivingCost", d.current_living_cost),
            inflation_rate=get("inflationRate", d.inflation_rate),
            investment_monthly=get("investmentMonthly", d.investment_monthly),
            investment_yield=get("investmentYield", d.investment_yield),
            education_mode=get("educationMode", d.education_mode),
            child_independence_age=get("childIndependenceAge", d.child_independence_age),
            cost_reduction_rate=get("costReductionRate", d.cost_reduction_rate),
            license_return_age=get("licenseReturnAge", d.license_return_age),
            univ_housing_type=get("univHousingType", d.univ_housing_type),
            univ_allowance=get("univAllowance", d.univ_allowance),
            salary_increase_amount=get("salaryIncreaseAmount", d.salary_increase_amount),
        )


def validate_settings(settings: SimulationSettings) -> list[str]:
    """Validate user-entered settings. Returns list of error messages."""
    errors = []
    if not MIN_PREDICTION_YEARS <= settings.prediction_years <= MAX_PREDICTION_YEARS:
        errors.append(
            f"予測期間は{MIN_PREDICTION_YEARS}〜{MAX_PREDICTION_YEARS}年の間で入力してください"
            f"（入力値: {settings.prediction_years}年）"
        )
    if settings.education_mode not in EDUCATION_MODES:
        errors.append(
            f"教育費プラン'{settings.education_mode}'は不明です（{', '.join(EDUCATION_MODES)}）"
        )
    if settings.univ_housing_type not in UNIV_HOUSING_TYPES:
        errors.append(
            f"大学時の居住形態'{settings.univ_housing_type}'は不明です（{', '.join(UNIV_HOUSING_TYPES)}）"
        )
    return errors
