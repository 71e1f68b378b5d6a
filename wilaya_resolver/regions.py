"""The 58 wilayas with their French and Arabic display names."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

MIN_WILAYA = 1
MAX_WILAYA = 58
# Alger.
DEFAULT_WILAYA = 16
CAPITAL_WILAYA = 16


@dataclass(frozen=True)
class Wilaya:
    code: int
    name_fr: str
    name_ar: str

    @property
    def prefix(self) -> str:
        """Two-digit prefix shared by the postal codes of its communes."""

        return f"{self.code:02d}"


_NAMES: tuple[tuple[str, str], ...] = (
    ("Adrar", "أدرار"),
    ("Chlef", "الشلف"),
    ("Laghouat", "الأغواط"),
    ("Oum El Bouaghi", "أم البواقي"),
    ("Batna", "باتنة"),
    ("Béjaïa", "بجاية"),
    ("Biskra", "بسكرة"),
    ("Béchar", "بشار"),
    ("Blida", "البليدة"),
    ("Bouira", "البويرة"),
    ("Tamanrasset", "تمنراست"),
    ("Tébessa", "تبسة"),
    ("Tlemcen", "تلمسان"),
    ("Tiaret", "تيارت"),
    ("Tizi Ouzou", "تيزي وزو"),
    ("Alger", "الجزائر"),
    ("Djelfa", "الجلفة"),
    ("Jijel", "جيجل"),
    ("Sétif", "سطيف"),
    ("Saïda", "سعيدة"),
    ("Skikda", "سكيكدة"),
    ("Sidi Bel Abbès", "سيدي بلعباس"),
    ("Annaba", "عنابة"),
    ("Guelma", "قالمة"),
    ("Constantine", "قسنطينة"),
    ("Médéa", "المدية"),
    ("Mostaganem", "مستغانم"),
    ("M'Sila", "المسيلة"),
    ("Mascara", "معسكر"),
    ("Ouargla", "ورقلة"),
    ("Oran", "وهران"),
    ("El Bayadh", "البيض"),
    ("Illizi", "إليزي"),
    ("Bordj Bou Arreridj", "برج بوعريريج"),
    ("Boumerdès", "بومرداس"),
    ("El Tarf", "الطارف"),
    ("Tindouf", "تندوف"),
    ("Tissemsilt", "تيسمسيلت"),
    ("El Oued", "الوادي"),
    ("Khenchela", "خنشلة"),
    ("Souk Ahras", "سوق أهراس"),
    ("Tipaza", "تيبازة"),
    ("Mila", "ميلة"),
    ("Aïn Defla", "عين الدفلى"),
    ("Naâma", "النعامة"),
    ("Aïn Témouchent", "عين تموشنت"),
    ("Ghardaïa", "غرداية"),
    ("Relizane", "غليزان"),
    ("Timimoun", "تيميمون"),
    ("Bordj Badji Mokhtar", "برج باجي مختار"),
    ("Ouled Djellal", "أولاد جلال"),
    ("Beni Abbes", "بني عباس"),
    ("In Salah", "عين صالح"),
    ("In Guezzam", "عين قزام"),
    ("Touggourt", "توقرت"),
    ("Djanet", "جانت"),
    ("El M'Ghair", "المغير"),
    ("El Meniaa", "المنيعة"),
)

WILAYAS: Dict[int, Wilaya] = {
    code: Wilaya(code, fr, ar) for code, (fr, ar) in enumerate(_NAMES, start=1)
}

# Spellings of the capital seen on order sheets besides the table names.
CAPITAL_ALTERNATES: tuple[str, ...] = ("الجزائر العاصمة", "Alger")


def is_valid_wilaya(code: object) -> bool:
    return isinstance(code, int) and not isinstance(code, bool) and MIN_WILAYA <= code <= MAX_WILAYA


def coerce_wilaya(value: object) -> Optional[int]:
    """Turn a hint (``16``, ``"16"``, ``" 09 "``, ``16.0``) into a wilaya id.

    Returns ``None`` for anything that is not an integer in 1..58. Strings are
    parsed on their leading digits, so ``"16 - Alger"`` still yields ``16``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        code = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        code = int(value)
    else:
        text = str(value).strip()
        digits = ""
        for index, char in enumerate(text):
            if char.isdigit() and char.isascii():
                digits += char
            elif char in "+-" and index == 0:
                digits += char
            else:
                break
        try:
            code = int(digits)
        except ValueError:
            return None
    return code if MIN_WILAYA <= code <= MAX_WILAYA else None


def wilaya_name_fr(code: int) -> str:
    wilaya = WILAYAS.get(code)
    return wilaya.name_fr if wilaya else str(code)


def wilaya_name_ar(code: int) -> str:
    wilaya = WILAYAS.get(code)
    return wilaya.name_ar if wilaya else ""
