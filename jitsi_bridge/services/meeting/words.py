ADJECTIVES = (
    "Amazing", "Brave", "Bright", "Calm", "Clever", "Cosmic", "Curious",
    "Daring", "Eager", "Electric", "Fancy", "Fearless", "Gentle", "Glowing",
    "Golden", "Happy", "Honest", "Jolly", "Kind", "Lively", "Lucky", "Mighty",
    "Nimble", "Noble", "Playful", "Polite", "Proud", "Quiet", "Rapid",
    "Silent", "Silver", "Smart", "Sunny", "Swift", "Tidy", "Vivid", "Wise",
    "Witty", "Young", "Zesty",
)

NOUNS = (
    "Apples", "Badgers", "Bears", "Bees", "Comets", "Crystals", "Dolphins",
    "Dragons", "Eagles", "Falcons", "Forests", "Foxes", "Galaxies", "Giants",
    "Harbors", "Islands", "Jaguars", "Kites", "Lanterns", "Lions", "Meadows",
    "Moons", "Oceans", "Otters", "Owls", "Pandas", "Pilots", "Planets",
    "Rivers", "Robots", "Rockets", "Sailors", "Stars", "Storms", "Tigers",
    "Valleys", "Voyagers", "Whales", "Wizards", "Wolves",
)

VERBS = (
    "Admire", "Build", "Celebrate", "Chase", "Climb", "Dance", "Discover",
    "Dream", "Explore", "Fly", "Gather", "Glide", "Greet", "Guard", "Hum",
    "Imagine", "Invent", "Jump", "Laugh", "Listen", "Meet", "Observe",
    "Paint", "Play", "Ponder", "Race", "Read", "Roam", "Sail", "Sing",
    "Sketch", "Soar", "Swim", "Talk", "Travel", "Wander", "Whisper", "Wonder",
    "Write", "Yodel",
)
