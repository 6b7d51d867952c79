"""
Built-in question bank.

One question per difficulty step for every subject. That covers sessions of
up to ten questions; a default-length test needs more questions loaded
through the admin API. ``level`` is the curriculum level the question
belongs to (1-20).
"""

SEED_QUESTIONS = [
    # ==========================================================================
    # English
    # ==========================================================================
    {
        "subject": "English",
        "difficulty": 1,
        "level": 1,
        "question_text": "Pick the correct word: 'They ___ happy today.'",
        "options": ["is", "are", "am", "be"],
        "correct_answer_index": 1,
        "category": "grammar",
    },
    {
        "subject": "English",
        "difficulty": 2,
        "level": 2,
        "question_text": "What is the opposite of 'ancient'?",
        "options": ["old", "modern", "broken", "famous"],
        "correct_answer_index": 1,
        "category": "vocabulary",
    },
    {
        "subject": "English",
        "difficulty": 3,
        "level": 3,
        "question_text": "Which word is a verb?",
        "options": ["table", "green", "swim", "slowly"],
        "correct_answer_index": 2,
        "category": "parts-of-speech",
    },
    {
        "subject": "English",
        "difficulty": 4,
        "level": 5,
        "question_text": "Choose the past tense of 'bring'.",
        "options": ["bringed", "brang", "brought", "brung"],
        "correct_answer_index": 2,
        "category": "grammar",
    },
    {
        "subject": "English",
        "difficulty": 5,
        "level": 7,
        "question_text": "Which sentence uses the present perfect?",
        "options": [
            "I saw that film.",
            "I have seen that film.",
            "I was seeing that film.",
            "I see that film.",
        ],
        "correct_answer_index": 1,
        "category": "grammar",
    },
    {
        "subject": "English",
        "difficulty": 6,
        "level": 9,
        "question_text": "Choose the word closest in meaning to 'reluctant'.",
        "options": ["eager", "unwilling", "careless", "curious"],
        "correct_answer_index": 1,
        "category": "vocabulary",
    },
    {
        "subject": "English",
        "difficulty": 7,
        "level": 11,
        "question_text": "Complete: 'If I ___ you, I would apologise.'",
        "options": ["am", "was being", "were", "had"],
        "correct_answer_index": 2,
        "category": "grammar",
    },
    {
        "subject": "English",
        "difficulty": 8,
        "level": 13,
        "question_text": "Which literary device is 'The wind whispered through the trees'?",
        "options": ["simile", "personification", "alliteration", "hyperbole"],
        "correct_answer_index": 1,
        "category": "literature",
    },
    {
        "subject": "English",
        "difficulty": 9,
        "level": 16,
        "question_text": "Choose the correct sentence.",
        "options": [
            "Hardly had we arrived when it began to rain.",
            "Hardly we had arrived when it began to rain.",
            "Hardly had we arrived than it began to rain.",
            "Hardly we arrived when it had begun to rain.",
        ],
        "correct_answer_index": 0,
        "category": "grammar",
    },
    {
        "subject": "English",
        "difficulty": 10,
        "level": 19,
        "question_text": "What does 'sesquipedalian' describe?",
        "options": [
            "a speech lasting one and a half hours",
            "a fondness for long words",
            "a poem with irregular metre",
            "a dispute over small details",
        ],
        "correct_answer_index": 1,
        "category": "vocabulary",
    },
    # ==========================================================================
    # Mathematics
    # ==========================================================================
    {
        "subject": "Mathematics",
        "difficulty": 1,
        "level": 1,
        "question_text": "What is 7 + 6?",
        "options": ["12", "13", "14", "15"],
        "correct_answer_index": 1,
        "category": "arithmetic",
    },
    {
        "subject": "Mathematics",
        "difficulty": 2,
        "level": 2,
        "question_text": "What is 9 x 4?",
        "options": ["32", "36", "38", "45"],
        "correct_answer_index": 1,
        "category": "arithmetic",
    },
    {
        "subject": "Mathematics",
        "difficulty": 3,
        "level": 4,
        "question_text": "What is 3/4 written as a decimal?",
        "options": ["0.34", "0.70", "0.75", "1.33"],
        "correct_answer_index": 2,
        "category": "fractions",
    },
    {
        "subject": "Mathematics",
        "difficulty": 4,
        "level": 5,
        "question_text": "Solve for x: 2x + 5 = 17",
        "options": ["5", "6", "7", "11"],
        "correct_answer_index": 1,
        "category": "algebra",
    },
    {
        "subject": "Mathematics",
        "difficulty": 5,
        "level": 7,
        "question_text": "What is the area of a circle with radius 3? (use pi)",
        "options": ["6pi", "9pi", "3pi", "12pi"],
        "correct_answer_index": 1,
        "category": "geometry",
    },
    {
        "subject": "Mathematics",
        "difficulty": 6,
        "level": 9,
        "question_text": "What is 15% of 240?",
        "options": ["24", "30", "36", "42"],
        "correct_answer_index": 2,
        "category": "percentages",
    },
    {
        "subject": "Mathematics",
        "difficulty": 7,
        "level": 11,
        "question_text": "What are the roots of x^2 - 5x + 6 = 0?",
        "options": ["1 and 6", "2 and 3", "-2 and -3", "-1 and 6"],
        "correct_answer_index": 1,
        "category": "algebra",
    },
    {
        "subject": "Mathematics",
        "difficulty": 8,
        "level": 14,
        "question_text": "What is the derivative of 3x^2 + 2x?",
        "options": ["6x + 2", "3x + 2", "6x^2 + 2", "x^3 + x^2"],
        "correct_answer_index": 0,
        "category": "calculus",
    },
    {
        "subject": "Mathematics",
        "difficulty": 9,
        "level": 16,
        "question_text": "What is log base 2 of 64?",
        "options": ["5", "6", "8", "32"],
        "correct_answer_index": 1,
        "category": "logarithms",
    },
    {
        "subject": "Mathematics",
        "difficulty": 10,
        "level": 19,
        "question_text": "What is the integral of 1/x dx?",
        "options": ["x^-2 + C", "ln|x| + C", "1/x^2 + C", "e^x + C"],
        "correct_answer_index": 1,
        "category": "calculus",
    },
    # ==========================================================================
    # Science
    # ==========================================================================
    {
        "subject": "Science",
        "difficulty": 1,
        "level": 1,
        "question_text": "What do plants need from the air to make food?",
        "options": ["oxygen", "carbon dioxide", "nitrogen", "helium"],
        "correct_answer_index": 1,
        "category": "biology",
    },
    {
        "subject": "Science",
        "difficulty": 2,
        "level": 2,
        "question_text": "At what temperature does water boil at sea level?",
        "options": ["50 C", "90 C", "100 C", "120 C"],
        "correct_answer_index": 2,
        "category": "physics",
    },
    {
        "subject": "Science",
        "difficulty": 3,
        "level": 4,
        "question_text": "Which planet is known as the Red Planet?",
        "options": ["Venus", "Mars", "Jupiter", "Mercury"],
        "correct_answer_index": 1,
        "category": "astronomy",
    },
    {
        "subject": "Science",
        "difficulty": 4,
        "level": 5,
        "question_text": "What is the chemical symbol for sodium?",
        "options": ["S", "So", "Na", "Sd"],
        "correct_answer_index": 2,
        "category": "chemistry",
    },
    {
        "subject": "Science",
        "difficulty": 5,
        "level": 7,
        "question_text": "Which organelle produces most of a cell's energy?",
        "options": ["nucleus", "ribosome", "mitochondrion", "vacuole"],
        "correct_answer_index": 2,
        "category": "biology",
    },
    {
        "subject": "Science",
        "difficulty": 6,
        "level": 9,
        "question_text": "What is the unit of electrical resistance?",
        "options": ["volt", "ampere", "watt", "ohm"],
        "correct_answer_index": 3,
        "category": "physics",
    },
    {
        "subject": "Science",
        "difficulty": 7,
        "level": 11,
        "question_text": "How many covalent bonds does carbon usually form?",
        "options": ["2", "3", "4", "6"],
        "correct_answer_index": 2,
        "category": "chemistry",
    },
    {
        "subject": "Science",
        "difficulty": 8,
        "level": 14,
        "question_text": "Which base pairs with adenine in DNA?",
        "options": ["cytosine", "guanine", "uracil", "thymine"],
        "correct_answer_index": 3,
        "category": "biology",
    },
    {
        "subject": "Science",
        "difficulty": 9,
        "level": 16,
        "question_text": "An object in free fall near Earth accelerates at about:",
        "options": ["4.9 m/s^2", "9.8 m/s^2", "19.6 m/s^2", "98 m/s^2"],
        "correct_answer_index": 1,
        "category": "physics",
    },
    {
        "subject": "Science",
        "difficulty": 10,
        "level": 19,
        "question_text": "Which particle mediates the electromagnetic force?",
        "options": ["gluon", "W boson", "photon", "graviton"],
        "correct_answer_index": 2,
        "category": "physics",
    },
    # ==========================================================================
    # History
    # ==========================================================================
    {
        "subject": "History",
        "difficulty": 1,
        "level": 1,
        "question_text": "Who were the rulers of ancient Egypt called?",
        "options": ["emperors", "pharaohs", "sultans", "tsars"],
        "correct_answer_index": 1,
        "category": "ancient",
    },
    {
        "subject": "History",
        "difficulty": 2,
        "level": 2,
        "question_text": "Which city was the centre of the Roman Empire?",
        "options": ["Athens", "Rome", "Carthage", "Alexandria"],
        "correct_answer_index": 1,
        "category": "ancient",
    },
    {
        "subject": "History",
        "difficulty": 3,
        "level": 4,
        "question_text": "In which year did World War II end?",
        "options": ["1918", "1939", "1945", "1950"],
        "correct_answer_index": 2,
        "category": "modern",
    },
    {
        "subject": "History",
        "difficulty": 4,
        "level": 5,
        "question_text": "Who was the first person to walk on the Moon?",
        "options": ["Yuri Gagarin", "Buzz Aldrin", "Neil Armstrong", "John Glenn"],
        "correct_answer_index": 2,
        "category": "modern",
    },
    {
        "subject": "History",
        "difficulty": 5,
        "level": 7,
        "question_text": "The Silk Road mainly connected China with:",
        "options": [
            "the Americas",
            "the Mediterranean world",
            "Australia",
            "Scandinavia",
        ],
        "correct_answer_index": 1,
        "category": "trade",
    },
    {
        "subject": "History",
        "difficulty": 6,
        "level": 9,
        "question_text": "Which empire did Timur (Tamerlane) found?",
        "options": [
            "the Mughal Empire",
            "the Timurid Empire",
            "the Ottoman Empire",
            "the Safavid Empire",
        ],
        "correct_answer_index": 1,
        "category": "medieval",
    },
    {
        "subject": "History",
        "difficulty": 7,
        "level": 11,
        "question_text": "The Magna Carta was sealed in which year?",
        "options": ["1066", "1215", "1415", "1649"],
        "correct_answer_index": 1,
        "category": "medieval",
    },
    {
        "subject": "History",
        "difficulty": 8,
        "level": 14,
        "question_text": "Which treaty ended the Thirty Years' War?",
        "options": [
            "Treaty of Versailles",
            "Peace of Westphalia",
            "Treaty of Utrecht",
            "Congress of Vienna",
        ],
        "correct_answer_index": 1,
        "category": "early-modern",
    },
    {
        "subject": "History",
        "difficulty": 9,
        "level": 16,
        "question_text": "Who wrote the astronomical tables compiled at the Samarkand observatory?",
        "options": ["Al-Biruni", "Ulugh Beg", "Ibn Sina", "Al-Khwarizmi"],
        "correct_answer_index": 1,
        "category": "science-history",
    },
    {
        "subject": "History",
        "difficulty": 10,
        "level": 19,
        "question_text": "The Investiture Controversy was a conflict between the papacy and:",
        "options": [
            "the Byzantine Emperor",
            "the Holy Roman Emperor",
            "the King of France",
            "the Caliph of Baghdad",
        ],
        "correct_answer_index": 1,
        "category": "medieval",
    },
    # ==========================================================================
    # Geography
    # ==========================================================================
    {
        "subject": "Geography",
        "difficulty": 1,
        "level": 1,
        "question_text": "Which is the largest ocean?",
        "options": ["Atlantic", "Indian", "Pacific", "Arctic"],
        "correct_answer_index": 2,
        "category": "physical",
    },
    {
        "subject": "Geography",
        "difficulty": 2,
        "level": 2,
        "question_text": "On which continent is Egypt?",
        "options": ["Asia", "Africa", "Europe", "South America"],
        "correct_answer_index": 1,
        "category": "continents",
    },
    {
        "subject": "Geography",
        "difficulty": 3,
        "level": 4,
        "question_text": "What is the capital of Japan?",
        "options": ["Osaka", "Kyoto", "Tokyo", "Seoul"],
        "correct_answer_index": 2,
        "category": "capitals",
    },
    {
        "subject": "Geography",
        "difficulty": 4,
        "level": 5,
        "question_text": "Which river flows through Baghdad?",
        "options": ["Euphrates", "Tigris", "Jordan", "Indus"],
        "correct_answer_index": 1,
        "category": "rivers",
    },
    {
        "subject": "Geography",
        "difficulty": 5,
        "level": 7,
        "question_text": "Which line of latitude is at 0 degrees?",
        "options": [
            "Tropic of Cancer",
            "Prime Meridian",
            "Equator",
            "Arctic Circle",
        ],
        "correct_answer_index": 2,
        "category": "coordinates",
    },
    {
        "subject": "Geography",
        "difficulty": 6,
        "level": 9,
        "question_text": "Which country has the most natural lakes?",
        "options": ["Russia", "Canada", "Finland", "United States"],
        "correct_answer_index": 1,
        "category": "physical",
    },
    {
        "subject": "Geography",
        "difficulty": 7,
        "level": 11,
        "question_text": "The Aral Sea lies between Kazakhstan and:",
        "options": ["Turkmenistan", "Uzbekistan", "Kyrgyzstan", "Tajikistan"],
        "correct_answer_index": 1,
        "category": "physical",
    },
    {
        "subject": "Geography",
        "difficulty": 8,
        "level": 14,
        "question_text": "Which is a doubly landlocked country?",
        "options": ["Mongolia", "Liechtenstein", "Switzerland", "Bolivia"],
        "correct_answer_index": 1,
        "category": "political",
    },
    {
        "subject": "Geography",
        "difficulty": 9,
        "level": 16,
        "question_text": "A katabatic wind is one that:",
        "options": [
            "blows downslope under gravity",
            "rises over a mountain",
            "circles a low pressure centre",
            "blows from sea to land at night",
        ],
        "correct_answer_index": 0,
        "category": "climate",
    },
    {
        "subject": "Geography",
        "difficulty": 10,
        "level": 19,
        "question_text": "Which plate boundary formed the Himalayas?",
        "options": [
            "divergent oceanic boundary",
            "transform boundary",
            "continental collision boundary",
            "oceanic subduction under oceanic plate",
        ],
        "correct_answer_index": 2,
        "category": "tectonics",
    },
]
