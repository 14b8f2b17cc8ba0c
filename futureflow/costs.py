"""Age-banded education and growth expense tables (円/月)."""

# 教育費概算（月額, 学校外活動費込み）
# 参照: 文部科学省「子供の学習費調査(R3)」, 日本政策金融公庫「教育費負担の実態調査(R3)」
EDUCATION_COSTS: dict[str, dict[str, int]] = {
    "public": {
        "kindergarten": 25000,   # 3-5歳: 無償化後も給食費・バス代等
        "elementary": 27000,     # 6-11歳
        "junior_high": 45000,    # 12-14歳: 塾費用が増加
        "high_school": 43000,    # 15-17歳
        "university": 90000,     # 18-21歳: 国公立
    },
    "private": {
        "kindergarten": 45000,
        "elementary": 140000,
        "junior_high": 120000,
        "high_school": 90000,
        "university": 140000,    # 私立理系含む平均
    },
}

# (下限年齢, 上限年齢, 区分) 両端含む
SCHOOL_STAGES: tuple[tuple[int, int, str], ...] = (
    (3, 5, "kindergarten"),
    (6, 11, "elementary"),
    (12, 14, "junior_high"),
    (15, 17, "high_school"),
    (18, 21, "university"),
)

# 成長に伴う生活費追加（教育費以外: 食費・通信費・被服費・小遣い）
GROWTH_EXPENSES: tuple[tuple[int, int, int], ...] = (
    (12, 14, 10000),  # 食べ盛り、スマホ開始
    (15, 17, 15000),  # ピーク、交際費増
    (18, 22, 10000),  # 大人並みだがバイト収入あり
)

UNIVERSITY_AGE_START = 18
UNIVERSITY_AGE_END = 21


def school_stage(age: int) -> str | None:
    for lo, hi, stage in SCHOOL_STAGES:
        if lo <= age <= hi:
            return stage
    return None


def education_cost(age: int, mode: str) -> int:
    """Return monthly education cost for a child of the given age.

    mode: "public", "private", or "public_private_univ"
    (public through high school, private university).
    """
    stage = school_stage(age)
    if stage is None:
        return 0
    if mode == "public_private_univ":
        table = EDUCATION_COSTS["private" if stage == "university" else "public"]
    else:
        table = EDUCATION_COSTS[mode]
    return table[stage]


def growth_expense(age: int) -> int:
    """Return the monthly non-education living cost increment for a child (uninflated)."""
    for lo, hi, amount in GROWTH_EXPENSES:
        if lo <= age <= hi:
            return amount
    return 0


def is_university_age(age: int) -> bool:
    return UNIVERSITY_AGE_START <= age <= UNIVERSITY_AGE_END
