"""
Notable days of the Hijri year and the school filter that decides which show.

Entries marked for every branch are always shown. Entries tied to a branch
appear only when that branch is enabled. Days are Hijri, so their Gregorian
date moves about eleven days earlier each year.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .hijri import RAMADAN


class Branch(str, Enum):
    ALL = "all"
    SUNNI = "sunni"
    SHIA = "shia"
    IBADI = "ibadi"


class Significance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ImportantDate:
    id: str
    name: str
    name_ar: str
    day: int
    month: int
    significance: Significance
    branches: tuple[Branch, ...]
    description: str
    controversial: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "nameAr": self.name_ar,
            "hijriDay": self.day,
            "hijriMonth": self.month,
            "significance": self.significance.value,
            "branch": [branch.value for branch in self.branches],
            "description": self.description,
            "controversial": self.controversial,
        }


@dataclass(frozen=True)
class SchoolFilter:
    sunni: bool = True
    shia: bool = False
    ibadi: bool = False

    @classmethod
    def parse(cls, value: Optional[str]) -> "SchoolFilter":
        """
        Build a filter from a comma separated list such as ``"sunni,shia"``.

        An empty or missing value gives the default filter. Unknown names raise
        ValueError.
        """
        if value is None or not value.strip():
            return cls()
        names = {part.strip().lower() for part in value.split(",") if part.strip()}
        known = {Branch.SUNNI.value, Branch.SHIA.value, Branch.IBADI.value}
        unknown = names - known
        if unknown:
            raise ValueError(f"Unknown school(s): {', '.join(sorted(unknown))}")
        return cls(sunni="sunni" in names, shia="shia" in names, ibadi="ibadi" in names)

    def enabled(self) -> frozenset[Branch]:
        flags = {Branch.SUNNI: self.sunni, Branch.SHIA: self.shia, Branch.IBADI: self.ibadi}
        return frozenset(branch for branch, on in flags.items() if on)

    def allows(self, entry: ImportantDate) -> bool:
        if Branch.ALL in entry.branches:
            return True
        return not self.enabled().isdisjoint(entry.branches)


IMPORTANT_ISLAMIC_DATES: tuple[ImportantDate, ...] = (
    ImportantDate(
        "islamic-new-year", "Islamic New Year", "رأس السنة الهجرية", 1, 1,
        Significance.MEDIUM, (Branch.ALL,),
        "First day of Muharram and of the Hijri year.",
    ),
    ImportantDate(
        "ashura", "Day of Ashura", "يوم عاشوراء", 10, 1,
        Significance.HIGH, (Branch.ALL,),
        "Tenth of Muharram, a recommended day of fasting.",
    ),
    ImportantDate(
        "arbaeen", "Arbaeen", "الأربعين", 20, 2,
        Significance.HIGH, (Branch.SHIA,),
        "Fortieth day after Ashura.",
    ),
    ImportantDate(
        "mawlid-standard", "Mawlid an-Nabi", "المولد النبوي", 12, 3,
        Significance.MEDIUM, (Branch.SUNNI, Branch.SHIA),
        "Commemoration of the birth of the Prophet.",
        controversial=True,
    ),
    ImportantDate(
        "isra-miraj", "Isra and Mi'raj", "الإسراء والمعراج", 27, 7,
        Significance.MEDIUM, (Branch.ALL,),
        "The Night Journey and Ascension.",
        controversial=True,
    ),
    ImportantDate(
        "laylat-al-baraa", "Laylat al-Bara'ah", "ليلة البراءة", 15, 8,
        Significance.MEDIUM, (Branch.SUNNI,),
        "Mid-Sha'ban night of forgiveness.",
        controversial=True,
    ),
    ImportantDate(
        "ramadan-begins", "Ramadan Begins", "بداية رمضان", 1, 9,
        Significance.HIGH, (Branch.ALL,),
        "First day of the month of fasting.",
    ),
    ImportantDate(
        "last-10-nights-ramadan", "Last Ten Nights", "العشر الأواخر", 21, 9,
        Significance.HIGH, (Branch.ALL,),
        "Start of the last ten nights of Ramadan.",
    ),
    ImportantDate(
        "laylat-al-qadr", "Laylat al-Qadr", "ليلة القدر", 27, 9,
        Significance.HIGH, (Branch.ALL,),
        "The Night of Decree, most often observed on the 27th.",
    ),
    ImportantDate(
        "eid-al-fitr", "Eid al-Fitr", "عيد الفطر", 1, 10,
        Significance.HIGH, (Branch.ALL,),
        "Festival marking the end of Ramadan.",
    ),
    ImportantDate(
        "six-days-shawwal", "Six Days of Shawwal", "ست من شوال", 2, 10,
        Significance.MEDIUM, (Branch.ALL,),
        "Six recommended fasts that may begin after Eid.",
    ),
    ImportantDate(
        "dhul-qidah-sacred", "Dhul Qi'dah Begins", "بداية ذو القعدة", 1, 11,
        Significance.LOW, (Branch.ALL,),
        "Start of the first of three consecutive sacred months.",
    ),
    ImportantDate(
        "first-10-days-dhul-hijjah", "First Ten Days of Dhul Hijjah", "العشر من ذي الحجة", 1, 12,
        Significance.HIGH, (Branch.ALL,),
        "The best days of the year for good deeds.",
    ),
    ImportantDate(
        "day-of-arafah", "Day of Arafah", "يوم عرفة", 9, 12,
        Significance.HIGH, (Branch.ALL,),
        "Day of the standing at Arafah, recommended fast for non-pilgrims.",
    ),
    ImportantDate(
        "eid-al-adha", "Eid al-Adha", "عيد الأضحى", 10, 12,
        Significance.HIGH, (Branch.ALL,),
        "Festival of Sacrifice.",
    ),
    ImportantDate(
        "days-of-tashriq", "Days of Tashriq", "أيام التشريق", 11, 12,
        Significance.MEDIUM, (Branch.ALL,),
        "The three days after Eid al-Adha, on which fasting is not allowed.",
    ),
    ImportantDate(
        "eid-al-ghadir", "Eid al-Ghadir", "عيد الغدير", 18, 12,
        Significance.HIGH, (Branch.SHIA,),
        "Commemoration of the sermon at Ghadir Khumm.",
    ),
)


def default_school_filter() -> SchoolFilter:
    return SchoolFilter()


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Hijri month must be between 1 and 12, got {month}")


def important_dates_for_month(month: int, filters: Optional[SchoolFilter] = None) -> list[ImportantDate]:
    """Entries falling in a Hijri month that ``filters`` allows, ordered by day."""
    _check_month(month)
    filters = filters or default_school_filter()
    return sorted(
        (entry for entry in IMPORTANT_ISLAMIC_DATES if entry.month == month and filters.allows(entry)),
        key=lambda entry: entry.day,
    )


def important_dates_for_day(day: int, month: int, filters: Optional[SchoolFilter] = None) -> list[ImportantDate]:
    return [entry for entry in important_dates_for_month(month, filters) if entry.day == day]


def is_important_date(day: int, month: int, filters: Optional[SchoolFilter] = None) -> bool:
    return bool(important_dates_for_day(day, month, filters))


def is_significant_month(month: int) -> bool:
    return month == RAMADAN


def months_with_important_dates(entries: Iterable[ImportantDate] = IMPORTANT_ISLAMIC_DATES) -> list[int]:
    return sorted({entry.month for entry in entries})
