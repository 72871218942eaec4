# flake8: noqa
# scripts/audit_resources.py

import asyncio
import typer
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import engine, create_db_and_tables
# 모든 테이블 모델을 메타데이터에 등록합니다.
from app.domains.models import *
from app.services.binding_service import ResourceBindingService

cli = typer.Typer()


async def run_audit(db: AsyncSession) -> int:
    """
    자원 일관성 점검을 한 번 실행하고 위반 항목을 출력합니다.
    위반 건수를 반환합니다.
    """
    findings = await ResourceBindingService(db).find_binding_inconsistencies()

    for item in findings["binding"]:
        print(f"[바인딩] {item['resource_kind']} {item['id']} (상태 {item['status']}): {item['issue']}")
    for item in findings["maintenance"]:
        print(
            f"[정비 기록] Device {item['device_id']} (상태 {item['status']}, "
            f"진행 중 {item['open_records']}건): {item['issue']}"
        )

    return len(findings["binding"]) + len(findings["maintenance"])


@cli.command()
def main(
    create_tables: bool = typer.Option(
        False, '--create-tables',
        help="점검 전에 테이블을 생성합니다. (개발용 데이터베이스)"
    ),
):
    """
    FRP 데이터베이스의 바인딩/상태 대응과 정비 기록 유일성을 점검합니다.
    위반 항목이 있으면 종료 코드 1로 끝납니다.
    """
    print("자원 일관성 점검을 시작합니다...")

    AsyncSessionLocal = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async def run_check() -> int:
        if create_tables:
            await create_db_and_tables()
        try:
            async with AsyncSessionLocal() as db:
                return await run_audit(db)
        finally:
            await engine.dispose()

    violations = asyncio.run(run_check())
    if violations:
        print(f"위반 항목 {violations}건이 발견되었습니다.")
        raise typer.Exit(code=1)
    print("위반 항목이 없습니다.")


if __name__ == "__main__":
    cli()
