"""
Verses shipped with the package for when the scripture source is unreachable.
"""

from __future__ import annotations

from quranlife.models import Verse

FALLBACK_DAILY_VERSE = Verse(
    id=262,
    surah="Al-Baqara",
    surah_number=2,
    ayah=255,
    text_ar=(
        "اللَّهُ لَا إِلَٰهَ إِلَّا هُوَ الْحَيُّ الْقَيُّومُ ۚ لَا تَأْخُذُهُ سِنَةٌ وَلَا نَوْمٌ ۚ "
        "لَّهُ مَا فِي السَّمَاوَاتِ وَمَا فِي الْأَرْضِ ۗ مَن ذَا الَّذِي يَشْفَعُ عِندَهُ إِلَّا بِإِذْنِهِ ۚ "
        "يَعْلَمُ مَا بَيْنَ أَيْدِيهِمْ وَمَا خَلْفَهُمْ ۖ وَلَا يُحِيطُونَ بِشَيْءٍ مِّنْ عِلْمِهِ إِلَّا بِمَا شَاءَ ۚ "
        "وَسِعَ كُرْسِيُّهُ السَّمَاوَاتِ وَالْأَرْضَ ۖ وَلَا يَئُودُهُ حِفْظُهُمَا ۚ وَهُوَ الْعَلِيُّ الْعَظِيمُ"
    ),
    text_en=(
        "Allah - there is no deity except Him, the Ever-Living, the Sustainer of [all] existence. "
        "Neither drowsiness overtakes Him nor sleep. To Him belongs whatever is in the heavens and "
        "whatever is on the earth. Who is it that can intercede with Him except by His permission? "
        "He knows what is [presently] before them and what will be after them, and they encompass "
        "not a thing of His knowledge except for what He wills. His Kursi extends over the heavens "
        "and the earth, and their preservation tires Him not. And He is the Most High, the Most Great."
    ),
    theme=("faith", "protection"),
    reflection=(
        "Ayat al-Kursi reminds us that Allah never tires and never sleeps; "
        "whatever weighs on you is already within His knowledge and care."
    ),
    practical_guidance=(
        "Recite Ayat al-Kursi after every obligatory prayer",
        "Read it before sleeping for protection through the night",
        "Reflect each day on one of the divine names mentioned in it",
    ),
    context="Ayat al-Kursi, the Verse of the Throne",
    life_application="Turn to this verse whenever you feel overwhelmed or unprotected.",
)

_PRAYER_THEME = ("prayer",)

PRAYER_FALLBACK_VERSES: tuple[Verse, ...] = (
    Verse(
        id=52,
        surah="Al-Baqara",
        surah_number=2,
        ayah=45,
        text_ar="وَاسْتَعِينُوا بِالصَّبْرِ وَالصَّلَاةِ ۚ وَإِنَّهَا لَكَبِيرَةٌ إِلَّا عَلَى الْخَاشِعِينَ",
        text_en=(
            "And seek help through patience and prayer, and indeed, it is difficult "
            "except for the humbly submissive [to Allah]."
        ),
        theme=_PRAYER_THEME,
        reflection="Prayer is a source of help, not only an obligation.",
    ),
    Verse(
        id=160,
        surah="Al-Baqara",
        surah_number=2,
        ayah=153,
        text_ar="يَا أَيُّهَا الَّذِينَ آمَنُوا اسْتَعِينُوا بِالصَّبْرِ وَالصَّلَاةِ ۚ إِنَّ اللَّهَ مَعَ الصَّابِرِينَ",
        text_en=(
            "O you who have believed, seek help through patience and prayer. "
            "Indeed, Allah is with the patient."
        ),
        theme=_PRAYER_THEME,
        reflection="Patience and prayer together carry the believer through hardship.",
    ),
    Verse(
        id=245,
        surah="Al-Baqara",
        surah_number=2,
        ayah=238,
        text_ar="حَافِظُوا عَلَى الصَّلَوَاتِ وَالصَّلَاةِ الْوُسْطَىٰ وَقُومُوا لِلَّهِ قَانِتِينَ",
        text_en=(
            "Maintain with care the [obligatory] prayers and [in particular] the middle prayer "
            "and stand before Allah, devoutly obedient."
        ),
        theme=_PRAYER_THEME,
        reflection="Guarding the prayers means protecting their times and their presence of heart.",
    ),
    Verse(
        id=2362,
        surah="Taa-Haa",
        surah_number=20,
        ayah=14,
        text_ar="إِنَّنِي أَنَا اللَّهُ لَا إِلَٰهَ إِلَّا أَنَا فَاعْبُدْنِي وَأَقِمِ الصَّلَاةَ لِذِكْرِي",
        text_en=(
            "Indeed, I am Allah. There is no deity except Me, so worship Me "
            "and establish prayer for My remembrance."
        ),
        theme=_PRAYER_THEME,
        reflection="Prayer exists for the remembrance of Allah; let it bring Him to mind.",
    ),
    Verse(
        id=3385,
        surah="Al-Ankaboot",
        surah_number=29,
        ayah=45,
        text_ar=(
            "اتْلُ مَا أُوحِيَ إِلَيْكَ مِنَ الْكِتَابِ وَأَقِمِ الصَّلَاةَ ۖ إِنَّ الصَّلَاةَ تَنْهَىٰ عَنِ "
            "الْفَحْشَاءِ وَالْمُنكَرِ ۗ وَلَذِكْرُ اللَّهِ أَكْبَرُ ۗ وَاللَّهُ يَعْلَمُ مَا تَصْنَعُونَ"
        ),
        text_en=(
            "Recite, [O Muhammad], what has been revealed to you of the Book and establish prayer. "
            "Indeed, prayer prohibits immorality and wrongdoing, and the remembrance of Allah is "
            "greater. And Allah knows that which you do."
        ),
        theme=_PRAYER_THEME,
        reflection="A prayer offered well shapes the hours between prayers.",
    ),
)

PRAYER_FALLBACK_REFERENCES: tuple[tuple[int, int], ...] = tuple(
    (v.surah_number, v.ayah) for v in PRAYER_FALLBACK_VERSES
)
