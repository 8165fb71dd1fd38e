# Model and vectorization configuration for the recipe search service

GENERATIVE_MODEL = "gpt-4o-mini"

EMBEDDING_MODEL = "text-embedding-3-small"
EMBEDDING_DIMENSION = 1536
BATCH_SIZE = 50

EXTERNAL_CALL_TIMEOUT_SECONDS = 10.0
SEARCH_RATE_LIMIT = "30/minute"

# Relevance policy
MIN_SIMILARITY_THRESHOLD = 0.1
MIN_INTENT_MATCH_SCORE = 0.6
MAX_RESULTS = 3
CANDIDATE_POOL_SIZE = 20
TEXT_MATCH_SIMILARITY = 0.6
HIGH_RELEVANCE_THRESHOLD = 0.8
PERFECT_MATCH_THRESHOLD = 0.9

# Tag taxonomies offered to the intent model
DIETARY_TAGS = [
    "vegetarian", "vegan", "gluten-free", "dairy-free", "keto", "paleo",
    "low-carb", "pescatarian", "omnivore", "whole30", "mediterranean",
    "dash-diet", "flexitarian", "raw-food", "plant-based", "carnivore",
    "atkins", "south-beach", "zone-diet", "alkaline", "anti-inflammatory",
    "fodmap-friendly", "kosher", "halal", "sugar-free", "grain-free",
    "nut-free", "soy-free", "egg-free", "shellfish-free", "low-fat",
    "low-sodium", "diabetic-friendly", "renal-diet", "heart-healthy-diet",
]

HEALTH_TAGS = [
    "high-protein", "low-carb", "heart-healthy", "low-sodium", "high-fiber",
    "antioxidant-rich", "calcium-rich", "iron-rich", "vitamin-rich",
    "omega-3-rich", "low-fat", "high-potassium", "magnesium-rich", "zinc-rich",
    "vitamin-d-rich", "vitamin-c-rich", "vitamin-b12-rich", "folate-rich",
    "probiotic", "prebiotic", "anti-inflammatory", "low-glycemic",
    "high-energy", "metabolism-boosting", "detoxifying", "alkalizing",
    "hydrating", "collagen-boosting", "brain-food", "mood-boosting",
    "stress-reducing", "immune-boosting", "gut-healthy", "skin-healthy",
    "bone-healthy", "eye-healthy", "liver-healthy", "kidney-healthy",
    "thyroid-supporting", "hormone-balancing", "blood-sugar-friendly",
    "cholesterol-lowering", "blood-pressure-friendly", "circulation-boosting",
    "respiratory-supporting", "joint-healthy", "muscle-building",
    "recovery-enhancing", "endurance-boosting", "weight-management",
    "appetite-suppressing", "satiety-promoting",
]

HEALTH_BENEFIT_TAGS = [
    "weight-loss", "weight-gain", "muscle-building", "energy-boost",
    "immune-support", "heart-health", "bone-health", "brain-health",
    "digestive-health", "skin-health", "eye-health", "liver-health",
    "kidney-health", "respiratory-health", "joint-health", "mental-clarity",
    "mood-enhancement", "stress-reduction", "sleep-improvement",
    "hormone-balance", "blood-sugar-control", "cholesterol-management",
    "blood-pressure-control", "circulation-improvement", "detoxification",
    "anti-aging", "inflammation-reduction", "recovery-acceleration",
    "endurance-enhancement", "strength-building", "flexibility-improvement",
    "metabolism-boost", "appetite-control", "satiety-enhancement",
    "nutrient-absorption", "gut-microbiome-support", "cognitive-function",
    "memory-enhancement", "focus-improvement", "anxiety-relief",
    "depression-support", "seasonal-allergy-relief", "cold-flu-prevention",
    "wound-healing", "tissue-repair", "cellular-regeneration",
    "longevity-support", "disease-prevention", "cancer-prevention",
    "diabetes-prevention", "osteoporosis-prevention", "alzheimer-prevention",
    "cardiovascular-protection",
]

# Keyword synonyms used by the rule-based intent extractor (tag -> substrings)
DIETARY_KEYWORDS = {
    "vegetarian": ["vegetarian"],
    "vegan": ["vegan", "plant-based"],
    "gluten-free": ["gluten-free", "gluten free", "celiac"],
    "dairy-free": ["dairy-free", "dairy free", "lactose-free", "lactose free"],
    "keto": ["keto", "ketogenic"],
    "paleo": ["paleo", "paleolithic"],
    "low-carb": ["low carb", "low-carb", "low carbohydrate", "keto", "atkins"],
    "pescatarian": ["pescatarian", "pescetarian"],
    "mediterranean": ["mediterranean", "med diet"],
    "whole30": ["whole30", "whole 30"],
    "dash-diet": ["dash diet"],
    "plant-based": ["plant-based", "plant based"],
    "sugar-free": ["sugar-free", "sugar free", "no sugar"],
    "grain-free": ["grain-free", "grain free"],
    "nut-free": ["nut-free", "nut free", "no nuts"],
    "soy-free": ["soy-free", "soy free"],
    "egg-free": ["egg-free", "egg free"],
    "low-fat": ["low fat", "low-fat"],
    "low-sodium": ["low sodium", "low-sodium", "low salt"],
    "diabetic-friendly": ["diabetic", "diabetes", "diabetic-friendly"],
    "heart-healthy-diet": ["heart healthy", "heart-healthy", "cardiac"],
}

HEALTH_TAG_KEYWORDS = {
    "high-protein": ["protein", "high protein", "high-protein"],
    "low-carb": ["low carb", "low-carb", "low carbohydrate"],
    "heart-healthy": ["heart healthy", "heart-healthy", "cardiac", "cardiovascular"],
    "low-sodium": ["low sodium", "low-sodium", "low salt"],
    "high-fiber": ["fiber", "fibre", "high fiber", "high-fiber"],
    "antioxidant-rich": ["antioxidant", "antioxidants", "antioxidant-rich"],
    "calcium-rich": ["calcium", "calcium rich", "calcium-rich"],
    "iron-rich": ["iron rich", "iron-rich", "high iron"],
    "vitamin-rich": ["vitamin", "vitamins", "vitamin rich"],
    "omega-3-rich": ["omega", "omega-3", "omega 3", "fish oil"],
    "low-fat": ["low fat", "low-fat"],
    "high-potassium": ["potassium", "high potassium"],
    "magnesium-rich": ["magnesium", "magnesium rich"],
    "anti-inflammatory": ["anti-inflammatory", "anti inflammatory", "inflammation"],
    "low-glycemic": ["low glycemic", "low-glycemic", "blood sugar"],
    "high-energy": ["energy", "energizing", "high energy"],
    "metabolism-boosting": ["metabolism", "metabolic", "fat burning"],
    "immune-boosting": ["immune", "immunity", "immune system"],
    "gut-healthy": ["gut", "digestive", "gut health"],
    "brain-food": ["brain", "cognitive", "mental"],
    "bone-healthy": ["bone", "bones", "bone health"],
    "skin-healthy": ["skin", "skin health", "complexion"],
    "muscle-building": ["muscle", "muscles", "muscle building"],
    "weight-management": ["weight loss", "weight management"],
    "probiotic": ["probiotic", "probiotics", "good bacteria"],
    "detoxifying": ["detox", "detoxifying", "cleanse"],
}

HEALTH_BENEFIT_KEYWORDS = {
    "weight-loss": ["weight loss", "lose weight", "fat loss", "slimming"],
    "muscle-building": ["muscle building", "build muscle", "gain muscle", "strength"],
    "energy-boost": ["energy", "energizing", "boost energy", "stamina"],
    "immune-support": ["immune", "immunity", "immune system", "cold prevention"],
    "heart-health": ["heart", "cardiac", "cardiovascular", "heart health"],
    "bone-health": ["bone", "bones", "bone health", "osteoporosis"],
    "brain-health": ["brain", "cognitive", "mental clarity", "memory"],
    "digestive-health": ["digestive", "digestion", "gut health", "stomach"],
    "skin-health": ["skin", "complexion", "skin health", "anti-aging"],
    "stress-reduction": ["stress", "anxiety", "relaxation", "calm"],
    "inflammation-reduction": ["inflammation", "anti-inflammatory", "joint pain"],
    "blood-sugar-control": ["blood sugar", "diabetes", "glucose", "insulin"],
    "cholesterol-management": ["cholesterol", "ldl", "hdl"],
    "blood-pressure-control": ["blood pressure", "hypertension"],
    "detoxification": ["detox", "cleanse", "liver", "toxins"],
    "recovery-acceleration": ["recovery", "post-workout", "muscle recovery"],
    "endurance-enhancement": ["endurance", "stamina", "athletic performance"],
    "mood-enhancement": ["mood", "depression", "happiness", "serotonin"],
    "sleep-improvement": ["sleep", "insomnia", "melatonin"],
    "hormone-balance": ["hormone", "hormonal", "pms", "menopause"],
}

QUICK_MEAL_WORDS = ["quick", "fast", "easy"]
QUICK_MEAL_MINUTES = 30
FAMILY_SERVINGS = 6
