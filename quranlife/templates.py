"""
Theme table and guidance templates.

``THEME_ORDER`` is the single source of truth for which themes exist and in
which order they are scored; earlier themes win classification ties.

Lookups into the template tables follow fixed fallbacks:
- practical guidance, duas, reflections, life applications -> "guidance"
- related habits -> "prayer"
"""

from __future__ import annotations

from quranlife.models import ChapterContext

DEFAULT_THEME = "guidance"
HABITS_FALLBACK_THEME = "prayer"

THEME_ORDER: tuple[str, ...] = (
    "patience",
    "prayer",
    "change",
    "family",
    "anxiety",
    "success",
    "health",
    "fitness",
    "strength",
    "faith",
    "knowledge",
    "gratitude",
    "wealth",
    DEFAULT_THEME,
)

# Exact-match synonyms; every entry must survive keyword extraction (len > 2).
THEME_SYNONYMS: dict[str, tuple[str, ...]] = {
    "patience": (
        "patience", "patient", "sabr", "endurance", "perseverance", "persevere",
        "waiting", "wait", "trials", "trial", "difficulty", "difficult", "hardship", "calm",
    ),
    "prayer": (
        "prayer", "prayers", "pray", "praying", "salah", "salat", "namaz", "worship",
        "dua", "remembrance", "dhikr", "mosque", "fajr", "isha", "quran", "tahajjud",
    ),
    "change": (
        "change", "transformation", "transform", "improvement", "improve", "growth",
        "grow", "development", "develop", "progress", "better", "habit", "habits", "reform",
    ),
    "family": (
        "family", "parents", "parent", "mother", "father", "children", "child", "kids",
        "spouse", "wife", "husband", "marriage", "relatives", "kinship", "siblings",
    ),
    "anxiety": (
        "anxiety", "anxious", "worry", "worried", "fear", "afraid", "stress", "stressed",
        "concern", "unease", "panic", "nervous", "overwhelmed",
    ),
    "success": (
        "success", "successful", "achievement", "achieve", "victory", "accomplishment",
        "accomplish", "triumph", "goal", "goals", "win", "excel",
    ),
    "health": (
        "health", "healthy", "healing", "heal", "wellness", "medicine", "cure", "gym",
        "exercise", "workout", "fitness", "physical", "body", "training", "sport", "run",
        "walk", "strong", "diet", "sleep",
    ),
    "fitness": (
        "fitness", "fit", "gym", "workout", "exercise", "training", "cardio", "running",
        "lifting", "weights", "muscle", "sport", "athletic",
    ),
    "strength": (
        "strength", "strong", "power", "resilience", "resilient", "courage", "brave",
        "steadfastness", "steadfast", "determination", "determined",
    ),
    "faith": (
        "faith", "iman", "belief", "believe", "trust", "tawakkul", "conviction",
        "certainty", "yaqeen",
    ),
    "knowledge": (
        "knowledge", "ilm", "learn", "learning", "study", "studying", "wisdom",
        "education", "understanding", "read", "reading", "memorize", "school", "university",
    ),
    "gratitude": (
        "gratitude", "grateful", "thankful", "thanks", "shukr", "blessing", "blessings",
        "appreciate", "contentment",
    ),
    "wealth": (
        "wealth", "money", "rizq", "provision", "sustenance", "income", "job", "career",
        "business", "trade", "savings", "debt", "charity", "sadaqah", "zakat", "work",
    ),
    DEFAULT_THEME: (
        "guidance", "guide", "hidayah", "direction", "path", "way", "light", "purpose",
        "decision", "lost",
    ),
}

PRACTICAL_GUIDANCE: dict[str, tuple[str, ...]] = {
    "patience": (
        "Make dua during difficult times: 'Rabbana afrigh 'alayna sabran' (Our Lord, pour upon us patience)",
        "Practice the 3-breath technique when feeling impatient",
        "Remember that every difficulty is temporary and has wisdom",
        "Read stories of Prophet Ayub (Job) for inspiration",
        "Set realistic timelines for your goals",
    ),
    "prayer": (
        "Set 5 phone reminders for daily prayers",
        "Prepare a clean prayer space in your home",
        "Learn the meanings of Surah Al-Fatiha",
        "Make dua in your own language after each prayer",
        "Join congregation prayers when possible",
    ),
    "change": (
        "Start with one small change and build momentum",
        "Write down your 'why' for wanting to change",
        "Find an accountability partner in your community",
        "Track your progress weekly",
        "Celebrate small victories along the way",
    ),
    "family": (
        "Schedule weekly family time without devices",
        "Make dua for your family members daily",
        "Practice active listening with family",
        "Express gratitude to family members regularly",
        "Resolve conflicts with wisdom and patience",
    ),
    "anxiety": (
        "Practice dhikr: Say 'La hawla wa la quwwata illa billah' 100 times",
        "Do wudu when feeling anxious - it brings calm",
        "Read Surah Al-Fatiha 7 times",
        "Practice deep breathing with 'Astaghfirullah'",
        "Seek professional help if anxiety persists",
    ),
    "success": (
        "Begin every project with 'Bismillah'",
        "Set SMART goals aligned with Islamic values",
        "Work hard but trust in Allah's decree (Tawakkul)",
        "Help others succeed alongside your own journey",
        "Give charity (sadaqah) from your earnings",
    ),
    "health": (
        "Treat your body as an amanah (trust) from Allah",
        "Eat moderately: one third food, one third water, one third air",
        "Sleep early after Isha and rise for Fajr",
        "Make dua for well-being after every prayer",
        "Keep a consistent daily movement routine",
    ),
    "fitness": (
        "Begin each session with Bismillah and a sincere intention",
        "Schedule training around the five daily prayers",
        "Stay consistent: small regular effort is beloved to Allah",
        "Hydrate well and avoid harming your body",
        "Rest one day each week to let your body recover",
    ),
    "strength": (
        "Remember that true strength is controlling yourself in anger",
        "Rely on Allah before relying on your own ability",
        "Face one difficult task each day instead of avoiding it",
        "Surround yourself with steadfast companions",
        "Say 'La hawla wa la quwwata illa billah' when you feel weak",
    ),
    "knowledge": (
        "Set aside 15 minutes daily for learning",
        "Begin study sessions with 'Rabbi zidni ilma'",
        "Teach one thing you learned to someone else each week",
        "Keep a notebook of lessons and reflections",
        "Attend a local study circle or online class",
    ),
    DEFAULT_THEME: (
        "Begin every task with Bismillah and a clear intention",
        "Pray Istikhara before important decisions",
        "Read a page of Quran with translation daily",
        "Seek advice from knowledgeable and trustworthy people",
        "Reflect each evening on what went well and what to improve",
    ),
}

DUA_RECOMMENDATIONS: dict[str, str] = {
    "patience": "Rabbana afrigh 'alayna sabran wa thabbit aqdamana (Our Lord, pour upon us patience and plant firmly our feet)",
    "prayer": "Rabbi ij'alni muqeemas-salati wa min dhurriyyati (My Lord, make me an establisher of prayer, and from my descendants)",
    "change": "Allahumma ahyini ma kanat al-hayatu khayran li (O Allah, keep me alive as long as life is good for me)",
    "family": "Rabbana hab lana min azwajina wa dhurriyyatina qurrata a'yun (Our Lord, grant us from our spouses and offspring comfort to our eyes)",
    "anxiety": "Hasbunallahu wa ni'mal wakeel (Allah is sufficient for us, and He is the best disposer of affairs)",
    "success": "Rabbi a'inni wa la tu'in 'alayya (My Lord, help me and do not help against me)",
    "health": "Allahumma 'afini fi badani (O Allah, grant me health in my body)",
    "strength": "Rabbana la tuhammilna ma la taqata lana bih (Our Lord, do not burden us with what we have no ability to bear)",
    "knowledge": "Rabbi zidni ilma (My Lord, increase me in knowledge)",
    "gratitude": "Rabbi awzi'ni an ashkura ni'mataka (My Lord, enable me to be grateful for Your favor)",
    DEFAULT_THEME: "Rabbana la tuzigh qulubana ba'd idh hadaytana (Our Lord, let not our hearts deviate after You have guided us)",
}

RELATED_HABITS: dict[str, tuple[str, ...]] = {
    "prayer": ("Daily 5 prayers", "Morning dhikr", "Evening dua"),
    "patience": ("Daily istighfar", "Meditation", "Gratitude journaling"),
    "change": ("Weekly self-review", "Daily Quran reading", "Morning intention setting"),
    "family": ("Family time", "Call parents", "Help with chores"),
    "anxiety": ("Morning adhkar", "Evening adhkar", "Daily istighfar"),
    "success": ("Daily planning", "Weekly sadaqah", "Tahajjud"),
    "health": ("Daily walk", "Drink water", "Sleep before midnight"),
    "fitness": ("Workout", "Stretching", "Drink water"),
    "knowledge": ("Daily reading", "Quran memorization", "Weekly study circle"),
    "gratitude": ("Gratitude journaling", "Say Alhamdulillah after meals", "Weekly sadaqah"),
}

REFLECTIONS: dict[str, tuple[str, ...]] = {
    "patience": (
        "Patience is not passive waiting; it is steadfast effort while trusting Allah's timing.",
        "Every trial carries a hidden mercy, and patience is the key that unlocks it.",
        "Allah is with those who are patient; you never face hardship alone.",
    ),
    "prayer": (
        "Prayer is the anchor of the day, returning the heart to Allah five times over.",
        "Each prayer is a private conversation with your Lord; guard it and it will guard you.",
    ),
    "change": (
        "Allah does not change the condition of a people until they change what is within themselves.",
        "Lasting change begins with a sincere intention and grows through small, consistent steps.",
    ),
    "family": (
        "Kindness to family is among the most beloved deeds to Allah.",
        "A home built on mercy and remembrance becomes a source of tranquility.",
    ),
    "anxiety": (
        "In the remembrance of Allah do hearts find rest.",
        "What is written for you will reach you; let your heart rest in that certainty.",
        "Anxiety loosens its grip when the heart hands its burdens to Allah.",
    ),
    "success": (
        "True success is the pleasure of Allah, and worldly goals become worship when pursued with sincerity.",
        "Effort is yours; results belong to Allah. Strive fully and trust completely.",
    ),
    "health": (
        "Your body is a trust from Allah; caring for it is an act of gratitude.",
        "A strong believer is better and more beloved to Allah, while there is good in all.",
    ),
    "fitness": (
        "Training the body with a good intention turns discipline into worship.",
        "Consistency in small efforts builds strength of body and of character.",
    ),
    "strength": (
        "Real strength is found in reliance on Allah and mastery over oneself.",
        "Allah does not burden a soul beyond what it can bear.",
    ),
    "faith": (
        "Faith grows through remembrance, reflection and righteous action.",
        "Trust in Allah is tying your camel and then relying on Him.",
    ),
    "knowledge": (
        "Seeking knowledge is a path that Allah makes easy toward Paradise.",
        "Those who know are not equal to those who do not; knowledge elevates the seeker.",
    ),
    "gratitude": (
        "If you are grateful, Allah will surely increase you.",
        "Gratitude turns what we have into enough, and more.",
    ),
    "wealth": (
        "Provision is written; seek it through lawful means and spend it with generosity.",
        "Charity never decreases wealth; it purifies and multiplies it.",
    ),
    DEFAULT_THEME: (
        "Allah guides those who sincerely seek Him to the straight path.",
        "Every sincere step toward good is seen and rewarded by Allah.",
        "The Quran is a light for those who reflect upon it.",
    ),
}

LIFE_APPLICATIONS: dict[str, tuple[str, ...]] = {
    "patience": (
        "Apply this when facing delays, difficulties, or when learning new skills.",
        "When progress feels slow, pause, make dua and keep going.",
    ),
    "prayer": (
        "Incorporate this understanding into your daily worship routine.",
        "Plan the rest of your day around your prayers, not the other way around.",
    ),
    "change": (
        "Use this guidance when setting personal development goals.",
        "Pick one habit to change this week and review it every evening.",
    ),
    "family": (
        "Let this shape how you speak and listen at home today.",
        "Reach out to one relative this week with kindness.",
    ),
    "anxiety": (
        "Turn to dhikr the moment worry rises instead of feeding it.",
        "Write down what you can control, act on it, and leave the rest to Allah.",
    ),
    "success": (
        "Begin your next task with Bismillah and measure success by sincerity and effort.",
        "Share the fruits of your success with those who helped you.",
    ),
    "health": (
        "Let this remind you that caring for your health is worship.",
        "Choose one healthy habit today with the intention of pleasing Allah.",
    ),
    "fitness": (
        "Renew your intention before each session so the effort counts twice.",
        "Keep your routine consistent even on days motivation is low.",
    ),
    "strength": (
        "Draw on this when a task feels too heavy to begin.",
        "Respond to provocation with restraint today.",
    ),
    "faith": (
        "Let this verse steady you when outcomes are uncertain.",
        "Act with full effort, then rest in trust.",
    ),
    "knowledge": (
        "Set aside a fixed time today to learn something beneficial.",
        "Share one lesson from today with someone close to you.",
    ),
    "gratitude": (
        "Name three blessings before you sleep tonight.",
        "Thank the people around you as a way of thanking Allah.",
    ),
    "wealth": (
        "Review your earning and spending for what pleases Allah.",
        "Set aside a small portion of today's income for charity.",
    ),
    DEFAULT_THEME: (
        "Reflect on this verse during your daily activities and decision-making.",
        "Let this verse guide one decision you make today.",
    ),
}

THEME_SEARCH_TERMS: dict[str, str] = {
    "patience": "patience",
    "prayer": "prayer",
    "change": "change",
    "family": "parents",
    "anxiety": "fear",
    "success": "triumph",
    "health": "healing",
    "fitness": "strength",
    "strength": "strength",
    "faith": "faith",
    "knowledge": "knowledge",
    "gratitude": "grateful",
    "wealth": "provision",
    DEFAULT_THEME: "guidance",
}

THEME_DESCRIPTIONS: dict[str, str] = {
    "patience": "Building resilience and endurance through Islamic teachings",
    "prayer": "Strengthening your connection with Allah through worship",
    "change": "Personal transformation guided by Quranic wisdom",
    "family": "Nurturing relationships with Islamic values",
    "anxiety": "Finding peace and calm through Islamic practices",
    "success": "Achieving goals while maintaining Islamic principles",
}

RECOMMENDED_ACTIONS: dict[str, tuple[str, ...]] = {
    "patience": ("Practice daily dhikr", "Read stories of prophets", "Join Islamic study groups"),
    "prayer": ("Attend mosque regularly", "Learn prayer meanings", "Make personal duas"),
    "change": ("Set Islamic goals", "Find Muslim mentors", "Track spiritual progress"),
}
DEFAULT_RECOMMENDED_ACTIONS: tuple[str, ...] = (
    "Seek Islamic knowledge",
    "Practice daily",
    "Connect with community",
)

# (chapter, verse count) pool for the random daily verse
CURATED_CHAPTERS: tuple[tuple[int, int], ...] = (
    (1, 7),  # Al-Fatiha
    (2, 286),  # Al-Baqarah
    (3, 200),  # Ali 'Imran
    (18, 110),  # Al-Kahf
    (36, 83),  # Ya-Sin
    (55, 78),  # Ar-Rahman
    (67, 30),  # Al-Mulk
    (112, 4),  # Al-Ikhlas
    (113, 5),  # Al-Falaq
    (114, 6),  # An-Nas
)

CHAPTER_CONTEXTS: dict[int, ChapterContext] = {
    1: ChapterContext("Prayer & Worship", "The opening chapter, perfect for daily recitation and reflection", "prayer"),
    2: ChapterContext("Guidance", "The longest chapter with comprehensive guidance for life"),
    3: ChapterContext("Family of Imran", "Stories of prophets and guidance for believers", "family"),
    18: ChapterContext("Stories & Lessons", "Contains the story of the cave and other parables", "patience"),
    36: ChapterContext("Heart of Quran", "Often called the heart of the Quran", "faith"),
    55: ChapterContext("Gratitude", "Emphasizes Allah's countless blessings", "gratitude"),
    67: ChapterContext("Sovereignty", "About Allah's dominion and the afterlife", "faith"),
    112: ChapterContext("Unity of Allah", "Declares the absolute oneness of Allah", "faith"),
    113: ChapterContext("Protection", "Seeking refuge from evil", "anxiety"),
    114: ChapterContext("Protection", "Seeking refuge in Allah from all harms", "anxiety"),
}
DEFAULT_CHAPTER_CONTEXT = ChapterContext("Islamic Guidance", "Divine guidance for spiritual growth")


def chapter_context(chapter: int) -> ChapterContext:
    return CHAPTER_CONTEXTS.get(chapter, DEFAULT_CHAPTER_CONTEXT)
