"""Display labels for enum-like employee fields.

Only non-English locales carry translations; unknown values and the English
locale display the stored value itself.
"""

from __future__ import annotations

UNKNOWN_EMPLOYEE: dict[str, str] = {"en": "Unspecified", "ar": "غير محدد"}

CATEGORY_LABELS: dict[str, dict[str, str]] = {
    "ar": {
        "doctor": "طبيب",
        "pharmacist": "صيدلي",
        "dentist": "أسنان",
        "physiotherapist": "علاج طبيعي",
        "administrative": "إداري",
        "other": "أخرى",
    },
}

GRADE_LABELS: dict[str, dict[str, str]] = {
    "ar": {
        "excellent": "ممتازة",
        "senior": "كبير",
        "first": "الأولى",
        "second": "الثانية",
        "third": "الثالثة",
    },
}

APPOINTMENT_LABELS: dict[str, dict[str, str]] = {
    "ar": {
        "permanent": "معين",
        "delegated": "منتدب",
        "mission": "مأمورية",
        "assignment": "تكليف",
        "other": "أخرى",
    },
}


def _lookup(table: dict[str, dict[str, str]], value: str, locale: str) -> str:
    return table.get(locale, {}).get(value, value)


def category_label(category: str, locale: str = "en") -> str:
    return _lookup(CATEGORY_LABELS, category, locale)


def grade_label(grade: str, locale: str = "en") -> str:
    return _lookup(GRADE_LABELS, grade, locale)


def appointment_label(appointment: str, locale: str = "en") -> str:
    return _lookup(APPOINTMENT_LABELS, appointment, locale)


def unknown_employee_label(locale: str = "en") -> str:
    return UNKNOWN_EMPLOYEE.get(locale, UNKNOWN_EMPLOYEE["en"])
