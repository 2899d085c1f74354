"""SQLite 数据库初始化

PRAGMA 配置 + 五张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

from ..config import SQLITE_BUSY_TIMEOUT_MS

# users 表 DDL
_USERS_DDL = """
CREATE TABLE IF NOT EXISTS users (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    email           TEXT NOT NULL,
    password_hash   TEXT NOT NULL,
    role            TEXT NOT NULL DEFAULT 'member',
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);
"""

# teams 表 DDL
_TEAMS_DDL = """
CREATE TABLE IF NOT EXISTS teams (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    description TEXT,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

# team_members 表 DDL -- user_id 为主键，保证一个用户最多属于一个团队
_TEAM_MEMBERS_DDL = """
CREATE TABLE IF NOT EXISTS team_members (
    user_id     TEXT PRIMARY KEY,
    team_id     TEXT NOT NULL,
    created_at  TEXT NOT NULL,

    FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE,
    FOREIGN KEY (team_id) REFERENCES teams(id)
);
"""

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id          TEXT PRIMARY KEY,
    title       TEXT NOT NULL,
    description TEXT,
    status      TEXT NOT NULL DEFAULT 'pending',
    priority    TEXT NOT NULL,
    team_id     TEXT NOT NULL,
    assigned_to TEXT,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL,

    FOREIGN KEY (team_id) REFERENCES teams(id),
    FOREIGN KEY (assigned_to) REFERENCES users(id) ON DELETE SET NULL
);
"""

# task_history 表 DDL -- append-only；不对 tasks/users 建外键，删除任务或用户不受历史记录阻塞
_TASK_HISTORY_DDL = """
CREATE TABLE IF NOT EXISTS task_history (
    id              TEXT PRIMARY KEY,
    task_id         TEXT NOT NULL,
    changed_by      TEXT NOT NULL,
    previous_status TEXT NOT NULL,
    new_status      TEXT NOT NULL,
    changed_at      TEXT NOT NULL
);
"""

_INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users(email);",
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_teams_name ON teams(name);",
    "CREATE INDEX IF NOT EXISTS idx_team_members_team_id ON team_members(team_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_team_id ON tasks(team_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_assigned_to ON tasks(assigned_to);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
    # 历史记录按任务 + 时间倒序读取
    (
        "CREATE INDEX IF NOT EXISTS idx_task_history_task_changed "
        "ON task_history(task_id, changed_at DESC);"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS};")

    # 创建表
    for ddl in (_USERS_DDL, _TEAMS_DDL, _TEAM_MEMBERS_DDL, _TASKS_DDL, _TASK_HISTORY_DDL):
        await conn.execute(ddl)

    # 创建索引
    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
