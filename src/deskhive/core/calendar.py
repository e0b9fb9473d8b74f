"""Pure calendar domain logic - solar to lunar conversion, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime

from . import lunar_data
from .errors import OutOfRange

STEMS_ZH = "甲乙丙丁戊己庚辛壬癸"
BRANCHES_ZH = "子丑寅卯辰巳午未申酉戌亥"
ZODIAC_ZH = "鼠牛虎兔龙蛇马羊猴鸡狗猪"
STEMS_EN = ["Jia", "Yi", "Bing", "Ding", "Wu", "Ji", "Geng", "Xin", "Ren", "Gui"]
BRANCHES_EN = ["Zi", "Chou", "Yin", "Mao", "Chen", "Si", "Wu", "Wei", "Shen", "You", "Xu", "Hai"]
ZODIAC_EN = [
    "Rat", "Ox", "Tiger", "Rabbit", "Dragon", "Snake",
    "Horse", "Goat", "Monkey", "Rooster", "Dog", "Pig",
]

WEEKDAYS = {
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
    "zh": ["星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日"],
}

MONTHS_ZH = ["正", "二", "三", "四", "五", "六", "七", "八", "九", "十", "冬", "腊"]
DIGITS_ZH = ["一", "二", "三", "四", "五", "六", "七", "八", "九", "十"]

LOCALES = ("en", "zh")


@dataclass(frozen=True)
class LunarDate:
    """A point in the lunisolar calendar. Leap months reuse their month number."""

    year: int
    month: int
    day: int
    is_leap: bool = False

    @property
    def stem_branch(self) -> tuple[int, int]:
        """Indices into the heavenly stems and earthly branches for the year."""
        return (self.year - 4) % 10, (self.year - 4) % 12


@dataclass(frozen=True)
class DateInfo:
    """Display descriptors for one solar date. Recomputed on every query."""

    solar_date: str
    weekday: str
    lunar_date: str
    lunar_year: str
    lunar_month: str
    lunar_day: str
    solar: date
    lunar: LunarDate


def weekday_index(solar: date) -> int:
    """Weekday (Monday = 0) from the day offset against the epoch's known weekday."""
    offset = (solar - lunar_data.EPOCH).days
    return (lunar_data.EPOCH_WEEKDAY + offset) % 7


def to_lunar(solar: date) -> LunarDate:
    """
    Convert a Gregorian date to its lunar date.

    Walks whole lunar years from the epoch, then the months of the
    enclosing year in calendar order with the leap month (if any)
    directly after its ordinary namesake.

    Raises:
        OutOfRange: if the date is outside the conversion table.
    """
    if isinstance(solar, datetime):
        solar = solar.date()
    if solar < lunar_data.EPOCH or solar > lunar_data.LAST_SUPPORTED:
        raise OutOfRange(
            f"{solar.isoformat()} outside supported range "
            f"{lunar_data.EPOCH.isoformat()}..{lunar_data.LAST_SUPPORTED.isoformat()}"
        )

    offset = (solar - lunar_data.EPOCH).days
    year = lunar_data.FIRST_YEAR
    while offset >= lunar_data.year_days(year):
        offset -= lunar_data.year_days(year)
        year += 1

    leap = lunar_data.leap_month(year)
    for month in range(1, 13):
        days = lunar_data.month_days(year, month)
        if offset < days:
            return LunarDate(year, month, offset + 1)
        offset -= days

        if month == leap:
            days = lunar_data.leap_month_days(year)
            if offset < days:
                return LunarDate(year, month, offset + 1, is_leap=True)
            offset -= days

    # Unreachable while year_days() agrees with the month walk
    raise OutOfRange(f"{solar.isoformat()} could not be placed in lunar year {year}")


def _zh_day(day: int) -> str:
    if day <= 10:
        return "初" + DIGITS_ZH[day - 1]
    if day < 20:
        return "十" + DIGITS_ZH[day - 11]
    if day == 20:
        return "二十"
    if day < 30:
        return "廿" + DIGITS_ZH[day - 21]
    return "三十"


def _format_zh(solar: date, lunar: LunarDate) -> tuple[str, str, str, str, str, str]:
    stem, branch = lunar.stem_branch
    year_name = f"{STEMS_ZH[stem]}{BRANCHES_ZH[branch]}年"
    month = ("闰" if lunar.is_leap else "") + MONTHS_ZH[lunar.month - 1] + "月"
    day = _zh_day(lunar.day)
    return (
        solar.strftime("%Y年%m月%d日"),
        WEEKDAYS["zh"][weekday_index(solar)],
        f"{year_name}{month}{day}",
        f"{year_name}（{ZODIAC_ZH[branch]}年）",
        month,
        day,
    )


def _format_en(solar: date, lunar: LunarDate) -> tuple[str, str, str, str, str, str]:
    stem, branch = lunar.stem_branch
    year_name = STEMS_EN[stem] + BRANCHES_EN[branch].lower()
    month = ("Leap Month " if lunar.is_leap else "Month ") + str(lunar.month)
    day = f"Day {lunar.day}"
    return (
        solar.isoformat(),
        WEEKDAYS["en"][weekday_index(solar)],
        f"{year_name} year, {month}, {day}",
        f"{year_name} ({ZODIAC_EN[branch]})",
        month,
        day,
    )


class CalendarResolver:
    """Resolves solar dates to DateInfo using the static lunar table."""

    def __init__(self, locale: str = "en"):
        if locale not in LOCALES:
            raise ValueError(f"Unsupported locale: {locale}")
        self.locale = locale

    def resolve(self, solar: date) -> DateInfo:
        """Describe a solar date. Raises OutOfRange outside 1900-01-31..2100-12-31."""
        if isinstance(solar, datetime):
            solar = solar.date()
        lunar = to_lunar(solar)
        formatter = _format_zh if self.locale == "zh" else _format_en
        solar_date, weekday, lunar_date, lunar_year, lunar_month, lunar_day = formatter(solar, lunar)
        return DateInfo(
            solar_date=solar_date,
            weekday=weekday,
            lunar_date=lunar_date,
            lunar_year=lunar_year,
            lunar_month=lunar_month,
            lunar_day=lunar_day,
            solar=solar,
            lunar=lunar,
        )

    def resolve_today(self, today: date | None = None) -> DateInfo:
        """Describe the current local date."""
        return self.resolve(today or date.today())
