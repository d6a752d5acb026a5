"""Demo data seeder for the Conduit API.

Builds users, follows, articles, favorites and comments through the domain
entities and repositories, so seeded rows obey the same rules as API
writes (slugs, timestamps, hashed passwords).
"""
import argparse
import asyncio
import logging
import random
import time
from datetime import datetime, timedelta, timezone

import conduit.models  # noqa: F401
from conduit.config import settings
from conduit.database import Base, engine, session_scope
from conduit.domain import Article, Comment, User
from conduit.log_config import setup_logging
from conduit.repositories import ArticleRepository, CommentRepository, UserRepository
from conduit.security import PasswordHasher

logger = logging.getLogger("seed")

TAGS = ["python", "fastapi", "postgresql", "redis", "docker", "kubernetes",
        "react", "typescript", "aws", "devops", "testing", "performance",
        "security", "microservices", "rest-api", "dragons"]

DEMO_PASSWORD = "password123"


async def seed(small: bool = False, reset: bool = False) -> None:
    num_users = 10 if small else 50
    num_articles = 100 if small else 2000
    max_comments = 2 if small else 5

    logger.info("Seeding %d users, %d articles", num_users, num_articles)
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    hasher = PasswordHasher(settings.BCRYPT_ROUNDS)
    # One hash for every demo account; bcrypt at production cost is slow.
    password_hash = hasher.hash(DEMO_PASSWORD)

    async with session_scope() as session:
        users_repo = UserRepository(session)
        users = []
        for i in range(num_users):
            user = User.create(
                email=f"user_{i:04d}@example.com",
                username=f"user_{i:04d}",
                password=password_hash,
                bio=f"I am demo user number {i}. I write about technology.",
            )
            await users_repo.save(user)
            users.append(user)

        for user in users:
            for target in random.sample(users, k=min(3, len(users))):
                if target.id != user.id:
                    await users_repo.follow(user.id, target.id)
        logger.info("Created %d users with follows", len(users))

    total_comments = 0
    batch_size = 500
    for batch_start in range(0, num_articles, batch_size):
        batch_end = min(batch_start + batch_size, num_articles)
        async with session_scope() as session:
            articles = ArticleRepository(session)
            comments = CommentRepository(session)
            for i in range(batch_start, batch_end):
                topic = random.choice(TAGS)
                created = datetime.now(timezone.utc) - timedelta(
                    days=random.randint(0, 365), seconds=random.randint(0, 86399)
                )
                article = Article.create(
                    title=f"Article {i}: How to optimize {topic} applications",
                    description=f"A guide to optimizing {topic} applications for production.",
                    body=f"This is the full body of article {i}. " * 20,
                    tags=random.sample(TAGS, k=random.randint(1, 4)),
                    author_id=random.choice(users).id,
                    created_at=created,
                )
                await articles.save(article)

                for fan in random.sample(users, k=random.randint(0, 3)):
                    await articles.favorite(article.id, fan.id)

                for _ in range(random.randint(1, max_comments)):
                    commenter = random.choice(users)
                    await comments.save(
                        Comment.create(
                            body=f"Great article! Very helpful. Comment by {commenter.username}.",
                            author_id=commenter.id,
                            article_id=article.id,
                        )
                    )
                    total_comments += 1
        logger.info("Batch %d-%d: articles created", batch_start, batch_end)

    elapsed = time.perf_counter() - start
    logger.info(
        "Seeding complete in %.1fs: %d users, %d articles, %d comments (password: %s)",
        elapsed, num_users, num_articles, total_comments, DEMO_PASSWORD,
    )


def main():
    parser = argparse.ArgumentParser(description="Seed the Conduit database with demo data")
    parser.add_argument("--small", action="store_true", help="Use a small dataset (100 articles)")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args()
    setup_logging()
    asyncio.run(seed(small=args.small, reset=args.reset))


if __name__ == "__main__":
    main()
