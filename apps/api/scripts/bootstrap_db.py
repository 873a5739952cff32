"""Create database schema and seed a sample project for development."""
from __future__ import annotations

import asyncio
from typing import Any

from propman.data import samples
from propman.db.session import SessionLocal, create_schema
from propman.models import Contract, Deadline, Expense, Maintenance, Project, ProjectMember, Property, Tenant, User
from propman.models.base import ProjectRecord
from propman.models.project import ProjectMemberRole
from propman.models.user import UserStatus
from propman.services.history import appended, new_entry

SEED_ACTOR = samples.PROJECT["owner_id"]


async def seed_users() -> None:

	async with SessionLocal() as session:
		async with session.begin():
			for data in samples.USERS:
				user = await session.get(User, data["id"])
				if user is None:
					session.add(User(**{**data, "status": UserStatus(data["status"])}))
				else:
					user.name = data["name"]
					user.email = data["email"]


async def seed_project() -> None:

	async with SessionLocal() as session:
		async with session.begin():
			project = await session.get(Project, samples.PROJECT["id"])
			if project is None:
				project = Project(
					id=samples.PROJECT["id"],
					name=samples.PROJECT["name"],
					owner_id=samples.PROJECT["owner_id"],
					members=[
						ProjectMember(user_id=user_id, role=ProjectMemberRole(role))
						for user_id, role in samples.PROJECT["members"]
					],
				)
				session.add(project)
			else:
				project.name = samples.PROJECT["name"]


async def seed_records(model: type[ProjectRecord], rows: list[dict[str, Any]]) -> None:

	async with SessionLocal() as session:
		async with session.begin():
			for row in rows:
				record = await session.get(model, row["id"])
				if record is not None:
					continue
				session.add(
					model(
						**row,
						project_id=samples.PROJECT["id"],
						history=appended([], new_entry(SEED_ACTOR, "Imported from sample data.")),
					)
				)


async def main() -> None:
	await create_schema()
	await seed_users()
	await seed_project()
	await seed_records(Property, samples.PROPERTIES)
	await seed_records(Tenant, samples.TENANTS)
	await seed_records(Contract, samples.CONTRACTS)
	await seed_records(Expense, samples.EXPENSES)
	await seed_records(Maintenance, samples.MAINTENANCES)
	await seed_records(Deadline, samples.DEADLINES)
	print("Sample project seeded.")


if __name__ == "__main__":
	asyncio.run(main())
