"""
Helper functions for building LLM prompts.
"""

import json
from typing import List, Optional
from app.constants import DIETARY_TAGS, HEALTH_TAGS, HEALTH_BENEFIT_TAGS
from app.schemas import IngredientInput, RecipeData


def _ingredient_text(ingredient) -> str:
    if isinstance(ingredient, IngredientInput):
        return ingredient.as_text()
    if isinstance(ingredient, dict):
        return " ".join(
            str(ingredient[key])
            for key in ("amount", "unit", "name")
            if ingredient.get(key)
        )
    return ""


def format_ingredients(ingredients) -> str:
    """
    Render ingredients as "amount unit name" joined by commas.

    Args:
        ingredients: IngredientInput entries or the stored {"name", "amount",
            "unit"} dicts of a Recipe row; anything else is skipped

    Returns:
        e.g. "2 cups rice, 1 tbsp olive oil"
    """
    return ", ".join(
        text for text in (_ingredient_text(item) for item in ingredients or []) if text
    )


def build_intent_system_prompt() -> str:
    """
    Returns the system prompt for search intent extraction, including the
    full tag taxonomies the model is allowed to choose from.
    """
    return f"""Extract structured search intent from a recipe query. Return ONLY a valid JSON object with these exact fields:

{{
  "dietary_tags": [],
  "total_time": null,
  "health_tags": [],
  "health_benefits": [],
  "servings": null
}}

dietary_tags (select multiple if applicable):
{json.dumps(DIETARY_TAGS)}

health_tags (select multiple if applicable):
{json.dumps(HEALTH_TAGS)}

health_benefits (select multiple if applicable):
{json.dumps(HEALTH_BENEFIT_TAGS)}

Rules:
- total_time: number in minutes (prep + cook time combined), or null
- servings: number of people it serves, or null
- Only use tags from the lists above
- Be generous with tag selection - include all relevant tags that apply
- Consider synonyms and related terms (e.g., "plant-based" and "vegan", "heart-healthy" and "cardiovascular")
- Look for cooking methods, ingredients, and health goals in the query
- Consider both explicit and implicit health intentions

Examples:
Query: "plant-based dinner for 4 under an hour"
{{"dietary_tags": ["vegan", "plant-based"], "total_time": 60, "health_tags": [], "health_benefits": [], "servings": 4}}

Query: "heart-healthy salmon"
{{"dietary_tags": ["pescatarian"], "total_time": null, "health_tags": ["heart-healthy", "omega-3-rich"], "health_benefits": ["heart-health", "cardiovascular-protection"], "servings": null}}

Return ONLY the JSON object, no explanation."""


def build_recipe_text(recipe: RecipeData) -> str:
    """Multi-line recipe summary used as context for analysis prompts."""
    return "\n".join(
        [
            f"Recipe: {recipe.title}",
            f"Description: {recipe.description}",
            f"Prep Time: {recipe.prep_time} minutes",
            f"Cook Time: {recipe.cook_time} minutes",
            f"Servings: {recipe.servings}",
            f"Difficulty: {recipe.difficulty}",
            f"Ingredients: {format_ingredients(recipe.ingredients)}",
            f"Instructions: {' '.join(recipe.instructions)}",
        ]
    )


def build_embedding_text(recipe) -> str:
    """
    Single-line text that is embedded into the recipe vector index.

    Accepts RecipeData or a Recipe row, so analysis and the backfill script
    embed identical text for the same recipe.
    """
    instructions = " ".join(str(step) for step in recipe.instructions or [])
    return (
        f"{recipe.title}. {recipe.description or ''}. "
        f"Ingredients: {format_ingredients(recipe.ingredients)}. "
        f"Instructions: {instructions}"
    )


def build_analysis_prompt(recipe: RecipeData) -> str:
    return f"""Analyze this recipe and provide health and nutritional information.

Requirements:
- health_tags: 2-5 specific health characteristics (heart-healthy, immune-boosting, anti-inflammatory, etc.)
- dietary_tags: applicable diet restrictions/types (empty array if none apply)
- health_benefits: 2-4 specific, well-established health benefits
- nutritional_info: realistic estimates per serving based on ingredients
- Consider cooking methods, ingredient combinations, and portion sizes
- Be conservative with health claims
- Return ONLY the JSON object, no other text or explanation

Recipe to analyze:
{build_recipe_text(recipe)}

Expected JSON format:
{{
  "health_tags": ["heart-healthy", "high-protein"],
  "dietary_tags": ["gluten-free", "dairy-free"],
  "health_benefits": ["heart-health", "muscle-building"],
  "nutritional_info": {{
    "calories_estimate": 450,
    "protein_grams": 35,
    "carbs_grams": 25,
    "fat_grams": 12,
    "fiber_grams": 8,
    "sodium_mg": 300
  }}
}}"""


def build_description_prompt(
    description: str,
    title: Optional[str] = None,
    ingredients: Optional[List[IngredientInput]] = None,
) -> str:
    ingredients_line = ""
    if ingredients:
        ingredients_line = f"Ingredients: {format_ingredients(ingredients)}\n"

    return (
        "Enhance this recipe description to make it more appealing, informative, and SEO-friendly.\n"
        "The enhanced description should:\n"
        "- Be 2-3 sentences long (around 50-80 words)\n"
        "- Highlight key flavors, textures, and cooking methods\n"
        "- Mention health benefits if applicable\n"
        "- Include when to serve this dish (breakfast, dinner, special occasions, etc.)\n"
        "- Be written in an engaging, conversational tone\n"
        '- NOT include generic phrases like "This recipe is" or "This dish is"\n'
        "- Start with a strong, descriptive sentence that hooks the reader\n\n"
        f"Original Recipe Title: {title or 'Not provided'}\n"
        f"{ingredients_line}"
        f"Original Description: {description}\n\n"
        "Provide ONLY the enhanced description text with no additional commentary, explanations, or formatting."
    )
