from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import AppConfig
from core.power_match import (
    AutoWithdrawalSweeper,
    EmployerPowerMatchGenerator,
    InvitationService,
    PowerMatchGenerator,
    PowerMatchQueries,
    ViewTracker,
)
from core.scoring import ScoringOracle, SqlScoringOracle
from database.database import create_db_engine, create_session_factory


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The engine and session factory are created once per process and shared
    by every service. DB access inside services goes through
    power_match_uow(session_factory), one unit of work per item.
    """
    config: AppConfig
    engine: Engine
    session_factory: sessionmaker
    oracle: ScoringOracle
    generator: PowerMatchGenerator
    employer_generator: EmployerPowerMatchGenerator
    view_tracker: ViewTracker
    sweeper: AutoWithdrawalSweeper
    invitations: InvitationService
    queries: PowerMatchQueries

    @classmethod
    def build(
        cls,
        config: AppConfig,
        engine: Optional[Engine] = None,
        oracle: Optional[ScoringOracle] = None
    ) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            engine: Existing engine to reuse (tests pass an in-memory one)
            oracle: Scoring oracle override; defaults to the SQL function

        Returns:
            Fully wired AppContext instance
        """
        if engine is None:
            engine = create_db_engine(config.database.url, echo=config.database.echo)
        session_factory = create_session_factory(engine)

        if oracle is None:
            oracle = cls._build_oracle(config, session_factory)

        return cls(
            config=config,
            engine=engine,
            session_factory=session_factory,
            oracle=oracle,
            generator=PowerMatchGenerator(session_factory, oracle, config.power_match),
            employer_generator=EmployerPowerMatchGenerator(session_factory, oracle, config.employer_match),
            view_tracker=ViewTracker(session_factory),
            sweeper=AutoWithdrawalSweeper(session_factory, config.withdrawal),
            invitations=InvitationService(session_factory),
            queries=PowerMatchQueries(session_factory, config.withdrawal, config.employer_match)
        )

    @staticmethod
    def _build_oracle(config: AppConfig, session_factory: sessionmaker) -> SqlScoringOracle:
        """Build the SQL scoring oracle from configuration."""
        scoring = config.scoring
        return SqlScoringOracle(
            session_factory,
            function_name=scoring.function_name,
            max_attempts=scoring.max_attempts,
            retry_wait_seconds=scoring.retry_wait_seconds
        )
