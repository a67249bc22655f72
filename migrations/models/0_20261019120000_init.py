from tortoise import BaseDBAsyncClient

RUN_IN_TRANSACTION = True


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "users" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "username" VARCHAR(64) NOT NULL UNIQUE,
    "name" VARCHAR(255) NOT NULL,
    "country" VARCHAR(100) NOT NULL,
    "school" VARCHAR(255) NOT NULL,
    "xp" INT NOT NULL DEFAULT 0,
    "weighted_xp" INT NOT NULL DEFAULT 0,
    "level" INT NOT NULL DEFAULT 1,
    "streak" INT NOT NULL DEFAULT 0,
    "last_active" TIMESTAMPTZ,
    "progression_score" INT NOT NULL DEFAULT 0,
    "stem_xp" INT NOT NULL DEFAULT 0,
    "humanities_xp" INT NOT NULL DEFAULT 0,
    "arts_xp" INT NOT NULL DEFAULT 0,
    "business_xp" INT NOT NULL DEFAULT 0,
    "language_xp" INT NOT NULL DEFAULT 0,
    "general_xp" INT NOT NULL DEFAULT 0,
    "average_mastery" DOUBLE PRECISION NOT NULL DEFAULT 0,
    "quizzes_taken" INT NOT NULL DEFAULT 0,
    "lessons_started" INT NOT NULL DEFAULT 0,
    "version" INT NOT NULL DEFAULT 0,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS "idx_users_usernam_266d85" ON "users" ("username");
CREATE INDEX IF NOT EXISTS "idx_users_country_c5a7ff" ON "users" ("country");
CREATE INDEX IF NOT EXISTS "idx_users_school_1b5b5e" ON "users" ("school");
CREATE INDEX IF NOT EXISTS "idx_users_weighte_0f8a1c" ON "users" ("weighted_xp");
CREATE INDEX IF NOT EXISTS "idx_users_progres_9d3e27" ON "users" ("progression_score");
CREATE INDEX IF NOT EXISTS "idx_users_school_weighted" ON "users" ("school", "weighted_xp" DESC);
COMMENT ON TABLE "users" IS 'Ученик.';
CREATE TABLE IF NOT EXISTS "lessons" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "title" VARCHAR(255) NOT NULL,
    "topic" VARCHAR(255) NOT NULL,
    "content" TEXT,
    "domain" VARCHAR(20) NOT NULL DEFAULT 'General',
    "difficulty_multiplier" DOUBLE PRECISION NOT NULL DEFAULT 1,
    "xp_reward" INT NOT NULL DEFAULT 100,
    "is_completed" BOOL NOT NULL DEFAULT False,
    "mastery_score" INT NOT NULL DEFAULT 0,
    "completed_at" TIMESTAMPTZ,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "user_id" INT NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE
);
COMMENT ON COLUMN "lessons"."domain" IS 'STEM: STEM\nHUMANITIES: Humanities\nARTS: Arts\nBUSINESS: Business\nLANGUAGE: Language\nGENERAL: General';
COMMENT ON TABLE "lessons" IS 'Урок, сгенерированный из материалов ученика.';
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "lessons";
        DROP TABLE IF EXISTS "users";"""
