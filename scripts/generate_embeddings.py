import argparse
import asyncio
import logging
import os
import sys
from sqlalchemy.orm import Session
from sqlalchemy import select, update

# --- Ensure pathing works for local imports ---
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(script_dir, os.pardir))
sys.path.insert(0, project_root)

from app.config import get_settings
from app.constants import BATCH_SIZE
from app.core.logging import setup_logging
from app.database import engine
from app.errors import EmbeddingError
from app.models import Recipe
from app.services.embeddings import EmbeddingGenerator
from app.utils.prompt_helpers import build_embedding_text

logger = logging.getLogger("generate_embeddings")


async def generate_embeddings_for_recipes(
    batch_size: int = BATCH_SIZE, generator: EmbeddingGenerator = None, bind=engine
) -> int:
    """Embeds recipes missing a vector and saves them batch by batch. Returns the count."""
    generator = generator or EmbeddingGenerator(get_settings())

    db_session = Session(bind=bind)
    total_processed = 0
    try:
        recipes_to_process = db_session.scalars(
            select(Recipe).filter(Recipe.embedding.is_(None))
        ).all()
        if not recipes_to_process:
            logger.info("All recipes already have embeddings.")
            return 0

        logger.info("Found %d recipes to embed.", len(recipes_to_process))
        for i in range(0, len(recipes_to_process), batch_size):
            batch = recipes_to_process[i : i + batch_size]
            texts = [build_embedding_text(r) for r in batch]
            vectors = await generator.embed_documents(texts)

            for recipe, vector in zip(batch, vectors):
                db_session.execute(
                    update(Recipe).where(Recipe.id == recipe.id).values(embedding=vector)
                )
                total_processed += 1
            db_session.commit()
            logger.info("Batch %d saved (%d recipes).", i // batch_size + 1, len(batch))
            await asyncio.sleep(0.5)

        logger.info("Vectorization complete. Total recipes processed: %d", total_processed)
        return total_processed
    except EmbeddingError:
        db_session.rollback()
        logger.exception("Embedding failed, rolled back the current batch.")
        raise
    finally:
        db_session.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Backfill recipe embeddings")
    parser.add_argument("--batch-size", type=int, default=BATCH_SIZE)
    args = parser.parse_args()

    setup_logging(get_settings().log_level)
    asyncio.run(generate_embeddings_for_recipes(batch_size=args.batch_size))
