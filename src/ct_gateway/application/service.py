"""Auth service: register, login.

Registration writes through a unit of work; login is a read on the
request-scoped session followed by token issuance.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import Account
from src.ct_account.infrastructure.persistence import SqlAccountRepository
from src.ct_common.errors import InvalidCredentialsError
from src.ct_gateway.auth.jwt_handler import TokenIssuer
from src.ct_gateway.auth.password import hash_password, verify_password
from src.ct_tx.domain.unit_of_work import TransactionManagerProtocol
from src.ct_tx.infrastructure.sqlalchemy_uow import AccountRepoFactory

logger = logging.getLogger("ct.auth")


class AuthService:
    """Stateless service: instantiate once, reuse across requests."""

    def __init__(
        self,
        tx_manager: TransactionManagerProtocol,
        token_issuer: TokenIssuer,
        default_role: str,
        account_repo_factory: AccountRepoFactory = SqlAccountRepository,
    ) -> None:
        self._tx = tx_manager
        self._issuer = token_issuer
        self._default_role = default_role
        self._account_repo_factory = account_repo_factory

    @property
    def token_lifetime_seconds(self) -> int:
        return self._issuer.lifetime_seconds

    def new_account(self, name: str, email: str, password: str) -> Account:
        """Build an unsaved account with a hashed credential and the default role."""
        return Account(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=self._default_role,
        )

    async def register(self, name: str, email: str, password: str) -> Account:
        """Raises EmailExistsError if the address is taken (the UNIQUE constraint decides)."""
        account = self.new_account(name, email, password)
        async with self._tx.scope() as uow:
            created = await uow.accounts.create_account(account)
            await uow.commit()
        logger.info("registered account id=%s", created.id)
        return created

    async def login(
        self, db: AsyncSession, email: str, password: str
    ) -> tuple[Account, str]:
        """Authenticate and return (account, access_token).

        Unknown email and wrong password both raise InvalidCredentialsError,
        so the response does not reveal which addresses are registered.
        """
        account = await self._account_repo_factory(db).get_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            raise InvalidCredentialsError()
        return account, self._issuer.issue(account)
