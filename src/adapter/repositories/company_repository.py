"""SQLAlchemy Company Repository Implementation"""

from typing import Dict, Optional, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.company_repository import CompanyRepository
from src.domain.company import Company


class SqlAlchemyCompanyRepository(CompanyRepository):
    """SQLAlchemy implementation of CompanyRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, company_id: int) -> Optional[Company]:
        statement = select(Company).where(Company.id == company_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, company_ids: Sequence[int]) -> Dict[int, Company]:
        ids = list(set(company_ids))
        if not ids:
            return {}

        statement = select(Company).where(Company.id.in_(ids))
        result = await self.session.execute(statement)
        return {company.id: company for company in result.scalars().all()}
