# memegen/data/captions.py
# 템플릿별 프롬프트 / 인터넷 밈 예시 캡션 (top, bottom)

TEMPLATE_PROMPTS: dict[str, str] = {
    "drake": "Create a Drake Hotline Bling style meme: the top is the thing rejected, the bottom is the thing preferred. Keep it about work, life, or tech.",
    "distracted": "Create a Distracted Boyfriend meme: the top is the current commitment, the bottom is the tempting alternative.",
    "expanding-brain": "Create an Expanding Brain meme: the top is the basic idea, the bottom is the absurdly 'enlightened' one.",
    "two-buttons": "Create a Two Buttons meme: two everyday choices that are hard to pick between.",
    "change-my-mind": "Create a Change My Mind meme: a controversial but funny opinion on top, 'Change my mind' on the bottom.",
    "success-kid": "Create a Success Kid meme: a small, relatable victory.",
    "one-does-not-simply": "Create a 'One Does Not Simply' meme: top is 'One does not simply', bottom is an everyday struggle.",
    "batman-slap": "Create a Batman Slapping Robin meme: top is a bad idea, bottom is the correction.",
    "is-this": "Create an 'Is This A Pigeon' meme: a funny misidentification.",
    "doge": "Create a Doge meme: short 'much'/'such'/'very ... wow' phrases.",
}

DEFAULT_PROMPT = "Create a funny meme text."

FALLBACK_CAPTIONS: dict[str, list[tuple[str, str]]] = {
    "drake": [
        ("Reading documentation", "Just trying random code until it works"),
        ("Going to the gym", "Ordering pizza"),
        ("Being productive", "Scrolling TikTok"),
    ],
    "distracted": [
        ("My current relationship", "That cute barista who remembers my order"),
        ("My job", "Remote work in pajamas"),
        ("My diet", "McDonald's at 2 AM"),
    ],
    "expanding-brain": [
        ("Using basic functions", "Writing everything in one line"),
        ("Using libraries", "Writing your own framework"),
        ("Following tutorials", "Teaching others"),
    ],
    "two-buttons": [
        ("Save money", "Buy the expensive thing anyway"),
        ("Go to bed early", "Watch one more episode"),
        ("Eat healthy", "Order takeout"),
    ],
    "change-my-mind": [
        ("Pineapple belongs on pizza", "Change my mind"),
        ("Coffee is a food group", "Change my mind"),
        ("Monday should be illegal", "Change my mind"),
    ],
    "success-kid": [
        ("When you finally fix that bug", "After 3 hours of googling"),
        ("When you find the perfect parking spot", "Right in front of the store"),
        ("When your code works on first try", "And you don't know why"),
    ],
    "one-does-not-simply": [
        ("One does not simply", "Walk into Mordor"),
        ("One does not simply", "Understand JavaScript"),
        ("One does not simply", "Wake up on Monday"),
    ],
    "batman-slap": [
        ("I can fix this with more code", "No, you need to delete code"),
        ("I'll just copy-paste from Stack Overflow", "That's not how this works"),
        ("I don't need to test this", "Yes, you absolutely do"),
    ],
    "is-this": [
        ("Is this a pigeon?", "No, it's a seagull"),
        ("Is this a bug?", "No, it's a feature"),
        ("Is this a problem?", "No, it's an opportunity"),
    ],
    "doge": [
        ("Much simple", "Very complex, wow"),
        ("Such code", "Very bug, wow"),
        ("Much coffee", "Very awake, wow"),
    ],
}

GENERIC_FALLBACK = [("Something funny", "Something even funnier")]
