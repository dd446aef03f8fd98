# scripts/create_admin.py

"""
학교와 관리자 계정을 만드는 운영용 CLI입니다.

사용 예:
    python -m scripts.create_admin --school "Maple Hall University" --email admin@maple.edu
"""

import asyncio
import typer
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import AsyncSessionLocal, engine
from app.core.exceptions import DuplicateEmail
from app.domains.school import crud as school_crud
from app.domains.school import schemas as school_schemas
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserRole

cli = typer.Typer()


async def create_admin_user(
    db: AsyncSession,
    *,
    school_name: str,
    email: str,
    password: str,
    full_name: str,
) -> bool:
    """
    학교가 없으면 만들고, 그 학교 소속의 인증 완료된 관리자 계정을 생성합니다.
    이메일이 이미 등록되어 있으면 False를 반환합니다.
    """
    db_school = await school_crud.school.get_by_attribute(db, attribute="name", value=school_name)
    if db_school is None:
        db_school = await school_crud.school.create(db, obj_in=school_schemas.SchoolCreate(name=school_name))
        typer.echo(f"학교를 생성했습니다: {db_school.name} ({db_school.id})")

    user_in = usr_schemas.RegisterRequest(
        email=email,
        password=password,
        full_name=full_name,
        school_id=db_school.id,
    )
    try:
        db_user = await usr_crud.user.create(db, obj_in=user_in, role=UserRole.ADMIN, is_verified=True)
    except DuplicateEmail:
        typer.echo(f"오류: 이미 존재하는 이메일입니다: {user_in.email}", err=True)
        return False

    typer.echo(f"관리자 계정이 성공적으로 생성되었습니다: {db_user.email} ({db_user.id})")
    return True


@cli.command()
def main(
    school_name: str = typer.Option(
        ..., '--school', '-s',
        prompt="학교 이름을 입력하세요",
        help="관리자가 소속될 학교 이름입니다. 없으면 새로 만듭니다."
    ),
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    full_name: str = typer.Option(
        "Administrator", '--name', '-n',
        prompt="관리자 이름을 입력하세요",
        help="관리자의 이름입니다."
    ),
):
    """
    DormLife 애플리케이션을 위한 새로운 관리자를 생성합니다.
    """
    if len(password) < 8:
        typer.echo("오류: 비밀번호는 최소 8자 이상이어야 합니다.", err=True)
        raise typer.Abort()

    async def run_creation() -> bool:
        try:
            async with AsyncSessionLocal() as db:
                return await create_admin_user(
                    db, school_name=school_name, email=email, password=password, full_name=full_name
                )
        finally:
            await engine.dispose()

    if not asyncio.run(run_creation()):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
