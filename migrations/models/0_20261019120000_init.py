from tortoise import BaseDBAsyncClient


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "tutors" (
    "id" VARCHAR(64) NOT NULL PRIMARY KEY,
    "name" VARCHAR(255) NOT NULL,
    "email" VARCHAR(255) NOT NULL,
    "subjects" JSONB NOT NULL,
    "availability" JSONB NOT NULL,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS "appointments" (
    "id" VARCHAR(64) NOT NULL PRIMARY KEY,
    "student_name" VARCHAR(255) NOT NULL,
    "email" VARCHAR(255) NOT NULL,
    "phone" VARCHAR(32),
    "grade" VARCHAR(50) NOT NULL,
    "subject" VARCHAR(100) NOT NULL,
    "class_name" VARCHAR(100) NOT NULL,
    "level" VARCHAR(50) NOT NULL,
    "day" VARCHAR(10) NOT NULL,
    "time" VARCHAR(5) NOT NULL,
    "status" VARCHAR(20) NOT NULL DEFAULT 'confirmed',
    "notes" TEXT,
    "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    "tutor_id" VARCHAR(64) NOT NULL REFERENCES "tutors" ("id") ON DELETE CASCADE,
    CONSTRAINT "uid_appointment_tutor_i_0b6c1e" UNIQUE ("tutor_id", "day", "time", "status")
);
COMMENT ON COLUMN "appointments"."status" IS 'CONFIRMED: confirmed';
CREATE TABLE IF NOT EXISTS "aerich" (
    "id" SERIAL NOT NULL PRIMARY KEY,
    "version" VARCHAR(255) NOT NULL,
    "app" VARCHAR(100) NOT NULL,
    "content" JSONB NOT NULL
);"""


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        DROP TABLE IF EXISTS "appointments";
        DROP TABLE IF EXISTS "tutors";"""
