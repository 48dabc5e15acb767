"""
Built-in passages used when the database has no matching text, and the
passages inserted by 'POST /api/v1/admin/seed'.
"""

from ..types.enums import Difficulty, TextCategory

QUOTES: dict[Difficulty, list[str]] = {
    Difficulty.EASY: [
        "Be yourself. Everyone else is already taken.",
        "Life is what happens when you are busy making other plans.",
        "Be the change you wish to see in the world.",
        "The only way to do great work is to love what you do.",
        "Stay hungry, stay foolish.",
        "The way to get started is to quit talking and begin doing.",
    ],
    Difficulty.MEDIUM: [
        "Live as if you were to die tomorrow. Learn as if you were to live forever. Knowledge is the ultimate investment in yourself.",
        "Success is not the key to happiness. Happiness is the key to success. If you love what you are doing, you will be successful.",
        "The only impossible journey is the one you never begin. Take the first step in faith even when you don't see the whole staircase.",
        "Your work is going to fill a large part of your life, and the only way to be truly satisfied is to do what you believe is great work.",
    ],
    Difficulty.HARD: [
        "The important thing is not to stop questioning. Curiosity has its own reason for existing. One cannot help but be in awe when contemplating the mysteries of eternity, of life, of the marvelous structure of reality.",
        "In the depth of winter, I finally learned that there was in me an invincible summer. The human capacity for resilience and renewal transcends even the most challenging circumstances.",
        "The most beautiful thing we can experience is the mysterious. It is the source of all true art and science, inspiring us to explore the unknown and push the boundaries of human understanding.",
    ],
}

PROGRAMMING: dict[Difficulty, list[str]] = {
    Difficulty.EASY: [
        "def greet(name):\n    return 'Hello, ' + name + '!'\n\nprint(greet('World'))",
        "numbers = [1, 2, 3, 4, 5]\ndoubled = [num * 2 for num in numbers]\nprint(doubled)",
        "count = 0\nwhile count < 5:\n    print('Count:', count)\n    count += 1",
    ],
    Difficulty.MEDIUM: [
        "async def fetch_user(client, user_id):\n    response = await client.get(f'/api/users/{user_id}')\n    response.raise_for_status()\n    return response.json()",
        "users = [{'name': 'Alice', 'age': 25}, {'name': 'Bob', 'age': 17}]\nadults = [user['name'] for user in users if user['age'] >= 18]\nprint(adults)",
        "class Calculator:\n    def __init__(self):\n        self.result = 0\n\n    def add(self, num):\n        self.result += num\n        return self",
    ],
    Difficulty.HARD: [
        "class Node:\n    def __init__(self, value):\n        self.value = value\n        self.left = None\n        self.right = None\n\n\ndef insert(root, value):\n    if root is None:\n        return Node(value)\n    if value < root.value:\n        root.left = insert(root.left, value)\n    else:\n        root.right = insert(root.right, value)\n    return root",
        "def memoize(func):\n    cache = {}\n\n    @wraps(func)\n    def wrapped(*args):\n        if args not in cache:\n            cache[args] = func(*args)\n        return cache[args]\n\n    return wrapped",
    ],
}

COMMON_WORDS: dict[Difficulty, list[str]] = {
    Difficulty.EASY: [
        "the and for are but not you all can had her was one our out day get has him his how its may new now old see two who boy did she use many make over such time very when come here then they this with have from will",
        "water house light fire tree book chair table door window hand foot head heart mind love hope peace time life good best help need want think know give take make find look feel hear speak read write learn teach play work rest",
    ],
    Difficulty.MEDIUM: [
        "keyboard monitor screen display device computer laptop desktop mobile tablet smartphone technology software hardware application program system network internet browser website database server client security privacy encryption",
        "adventure journey exploration discovery experience knowledge wisdom understanding intelligence creativity imagination inspiration motivation determination perseverance resilience courage confidence leadership teamwork collaboration communication",
    ],
    Difficulty.HARD: [
        "pharmaceutical biotechnology nanotechnology artificial intelligence machine learning neural network quantum computing cryptocurrency decentralization verification authentication cybersecurity vulnerability penetration forensics compliance governance regulatory framework",
        "phenomenological epistemological ontological metaphysical existentialist constructivist postmodernist deconstructionist hermeneutic dialectical paradigmatic theoretical methodological empirical quantitative qualitative interdisciplinary",
    ],
}

LITERATURE_WORDS: list[str] = (
    "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua enim ad minim veniam "
    "quis nostrud exercitation ullamco laboris nisi aliquip ex ea commodo "
    "consequat duis aute irure in reprehenderit voluptate velit esse cillum "
    "fugiat nulla pariatur excepteur sint occaecat cupidatat non proident sunt "
    "culpa qui officia deserunt mollit anim id est laborum"
).split()

LITERATURE_WORD_COUNT: dict[Difficulty, int] = {
    Difficulty.EASY: 50,
    Difficulty.MEDIUM: 80,
    Difficulty.HARD: 120,
}

DEFAULT_TEXTS: list[str] = [
    "The quick brown fox jumps over the lazy dog. This pangram contains every letter of the alphabet.",
    "Programming is not about typing, it's about thinking. Speed comes with practice and understanding.",
    "Type like the wind, think like the storm. Every keystroke brings you closer to mastery.",
    "In the world of keyboards and screens, precision and speed dance together in perfect harmony.",
    "Practice makes perfect, but perfect practice makes champions. Focus on accuracy first, speed will follow.",
]

SEED_TEXTS: list[dict] = [
    {
        "title": "Quick Brown Fox",
        "content": "The quick brown fox jumps over the lazy dog. This pangram contains every letter of the alphabet at least once.",
        "category": TextCategory.COMMON_WORDS,
        "difficulty": Difficulty.EASY,
        "author": "Traditional",
        "tags": ["pangram", "alphabet", "practice"],
    },
    {
        "title": "Programming Wisdom",
        "content": "Programming is not about typing, it is about thinking. Speed comes with practice and understanding the fundamentals.",
        "category": TextCategory.PROGRAMMING,
        "difficulty": Difficulty.MEDIUM,
        "tags": ["programming", "wisdom", "practice"],
    },
    {
        "title": "Typing Mastery",
        "content": "Type like the wind, think like the storm. Every keystroke brings you closer to mastery and excellence.",
        "category": TextCategory.QUOTES,
        "difficulty": Difficulty.MEDIUM,
        "tags": ["motivation", "typing", "mastery"],
    },
    {
        "title": "Shakespeare Quote",
        "content": "To be or not to be, that is the question. Whether tis nobler in the mind to suffer the slings and arrows of outrageous fortune.",
        "category": TextCategory.LITERATURE,
        "difficulty": Difficulty.HARD,
        "author": "William Shakespeare",
        "source": "Hamlet",
        "tags": ["shakespeare", "classic", "literature"],
    },
    {
        "title": "Code Comments",
        "content": "Good code is its own best documentation. As you are about to add a comment, ask yourself if you can improve the code.",
        "category": TextCategory.PROGRAMMING,
        "difficulty": Difficulty.MEDIUM,
        "tags": ["programming", "documentation"],
    },
    {
        "title": "Practice Makes Perfect",
        "content": "Practice makes perfect, but perfect practice makes champions. Focus on accuracy first, speed will naturally follow.",
        "category": TextCategory.QUOTES,
        "difficulty": Difficulty.EASY,
        "tags": ["practice", "motivation", "improvement"],
    },
    {
        "title": "Keyboard Symphony",
        "content": "In the world of keyboards and screens, precision and speed dance together in perfect harmony.",
        "category": TextCategory.QUOTES,
        "difficulty": Difficulty.MEDIUM,
        "tags": ["typing", "precision", "harmony"],
    },
    {
        "title": "Algorithm Complexity",
        "content": "Understanding time and space complexity is crucial for writing efficient algorithms and optimal data structures.",
        "category": TextCategory.PROGRAMMING,
        "difficulty": Difficulty.HARD,
        "tags": ["algorithms", "complexity", "efficiency"],
    },
]
