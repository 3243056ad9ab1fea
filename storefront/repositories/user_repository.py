"""
User Repository - Data Access Layer for Users

Author: TM3
"""
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from psycopg2 import errors as pg_errors

from storefront.core.database import contains_pattern, transaction
from storefront.core.exceptions import EmailAlreadyExists, RepositoryError
from storefront.domain.user import User

USER_COLUMNS = """
    id, email, password_hash, first_name, last_name, role, created_at, updated_at
"""

UPDATABLE_COLUMNS = ('email', 'password_hash', 'first_name', 'last_name', 'role')


class UserRepository:
    """Repository for User data access"""

    def create(
        self,
        email: str,
        password_hash: str,
        first_name: str = "",
        last_name: str = "",
        role: str = "customer"
    ) -> User:
        """
        Insert a user

        Raises:
            EmailAlreadyExists: unique constraint on email hit
        """
        try:
            with transaction() as cursor:
                cursor.execute(f"""
                    INSERT INTO users (email, password_hash, first_name, last_name, role)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {USER_COLUMNS}
                """, (email, password_hash, first_name, last_name, role))
                row = cursor.fetchone()
        except RepositoryError as e:
            if isinstance(e.__cause__, pg_errors.UniqueViolation):
                raise EmailAlreadyExists() from e
            raise

        return User(**row)

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        with transaction() as cursor:
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s", (user_id,))
            row = cursor.fetchone()

        return User(**row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Find user by email (case-insensitive)"""
        with transaction() as cursor:
            cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE LOWER(email) = LOWER(%s)",
                (email,)
            )
            row = cursor.fetchone()

        return User(**row) if row else None

    def update(self, user_id: UUID, fields: Dict[str, Any]) -> Optional[User]:
        """
        Partially update a user

        Returns:
            Updated user or None if not found
        """
        assignments = []
        params = []
        for column in UPDATABLE_COLUMNS:
            if column in fields:
                assignments.append(f"{column} = %s")
                params.append(fields[column])

        if not assignments:
            return self.get_by_id(user_id)

        assignments.append("updated_at = NOW()")

        try:
            with transaction() as cursor:
                cursor.execute(f"""
                    UPDATE users
                    SET {", ".join(assignments)}
                    WHERE id = %s
                    RETURNING {USER_COLUMNS}
                """, params + [user_id])
                row = cursor.fetchone()
        except RepositoryError as e:
            if isinstance(e.__cause__, pg_errors.UniqueViolation):
                raise EmailAlreadyExists() from e
            raise

        return User(**row) if row else None

    def delete(self, user_id: UUID) -> bool:
        with transaction() as cursor:
            cursor.execute("DELETE FROM users WHERE id = %s", (user_id,))
            deleted = cursor.rowcount

        return deleted > 0

    def list(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[User], int]:
        """
        Find users with filters

        Args:
            search: Matches email, first name or last name
            role: Restrict to one role

        Returns:
            Tuple of (list of users, total count)
        """
        conditions = []
        params = []

        if role:
            conditions.append("role = %s")
            params.append(role)

        if search:
            conditions.append("(email ILIKE %s OR first_name ILIKE %s OR last_name ILIKE %s)")
            search_param = contains_pattern(search)
            params.extend([search_param, search_param, search_param])

        where_clause = " AND ".join(conditions) if conditions else "1=1"

        with transaction() as cursor:
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM users
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE {where_clause}
                ORDER BY created_at DESC, id
                LIMIT %s OFFSET %s
            """, params + [limit, offset])
            rows = cursor.fetchall()

        return [User(**row) for row in rows], total
