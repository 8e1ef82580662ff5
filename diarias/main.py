"""Command-line entry point for the Diárias client."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging.config
import re
import sys
from typing import Dict, List, Optional, Sequence

from .config import LOGGING_CONFIG, data_dir, load_default_credentials
from .core.models import EmployeeFields, Level, WorkDayType
from .core.months import Month
from .core.preferences import PreferenceStore
from .core.pricing import format_brl
from .core.reconcile import DaySelection
from .core.roster_view import SORT_KEYS, monthly_summary, visible_employees
from .core.validation import EmployeeValidationError, parse_money
from .services.api_client import APIError, AuthError
from .services.session import RosterSession, UnknownEmployeeError

DAY_SPEC = re.compile(r"^(?P<day>\d{1,2})(?P<festa>[fF])?(?:\+(?P<hours>\d+))?$")


def _token_path():
    return data_dir() / "api_token.json"


def parse_level(text: str) -> Level:
    wanted = text.strip().casefold()
    for level in Level:
        if wanted in (level.value.casefold(), level.name.casefold()):
            return level
    raise argparse.ArgumentTypeError(
        f"nível inválido {text!r}; use um de: {', '.join(l.value for l in Level)}"
    )


def parse_day_specs(month: Month, specs: Sequence[str]) -> Dict[str, DaySelection]:
    """``5`` = dia comum, ``20f`` = dia de festa, ``5+2`` = two extra hours."""
    selections: Dict[str, DaySelection] = {}
    for spec in specs:
        m = DAY_SPEC.match(spec.strip())
        if not m:
            raise ValueError(f"dia inválido {spec!r}; formato DIA[f][+HORAS]")
        day = month.day(int(m.group("day")))
        day_type = WorkDayType.FESTA if m.group("festa") else WorkDayType.COMUM
        selections[day.isoformat()] = DaySelection(day_type, int(m.group("hours") or 0))
    return selections


async def _authenticate(session: RosterSession) -> None:
    """Token file from ``login``, then env/config token, then stored credentials."""
    token_file = _token_path()
    if token_file.exists():
        data = json.loads(token_file.read_text(encoding="utf-8"))
        if data.get("access_token"):
            session.client.set_token(data["access_token"], data.get("expires_at"))
            return

    creds = load_default_credentials()
    if creds.get("access_token"):
        session.client.set_token(creds["access_token"] or "")
        return
    if creds.get("username") and creds.get("password"):
        await session.sign_in(creds["username"] or "", creds["password"] or "")
        return
    raise AuthError("Não autenticado. Rode `python -m diarias login` primeiro.")


def _fields_from_args(args: argparse.Namespace, base: Optional[EmployeeFields] = None) -> EmployeeFields:
    values = base.model_dump() if base is not None else {}
    if args.name is not None:
        values["name"] = args.name
    if args.artistic_name is not None:
        values["artistic_name"] = args.artistic_name
    if args.level is not None:
        values["level"] = args.level
    for attr, key in (("daily", "daily_rate"), ("party", "party_rate"), ("extra", "extra_hour_rate")):
        raw = getattr(args, attr)
        if raw is not None:
            values[key] = parse_money(raw, key)
    values.setdefault("name", "")
    return EmployeeFields(**values)


# ---------- commands ----------


async def cmd_login(args: argparse.Namespace) -> int:
    session = RosterSession()
    username = args.username or input("Usuário: ")
    password = getpass.getpass("Senha: ")
    try:
        if args.register:
            await session.client.register_user(username, password)
        token = await session.client.login(username, password)
    finally:
        await session.close()
    path = _token_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"access_token": token.access_token, "expires_at": token.expires_at}), encoding="utf-8")
    print(f"Conectado como {username}.")
    return 0


async def cmd_logout(args: argparse.Namespace) -> int:
    path = _token_path()
    if path.exists():
        path.unlink()
    print("Sessão encerrada.")
    return 0


async def cmd_list(args: argparse.Namespace, session: RosterSession) -> int:
    employees = visible_employees(await session.refresh(), args.search or "", args.sort, args.desc)
    if not employees:
        print("Nenhum funcionário encontrado.")
        return 0
    month = Month.parse(args.month) if args.month else Month.current()
    print(f"Mês: {month.label_pt()}")
    for e in employees:
        summary = monthly_summary(e, month)
        print(
            f"{e.id}  {e.name} ({e.artistic_name or '-'})  [{e.level.value}]  "
            f"{summary.day_count} diárias  {format_brl(summary.total)}"
        )
        if args.details:
            for wd in summary.work_days:
                extra = f" +{wd.extra_hours}h" if wd.extra_hours else ""
                print(f"    {wd.date.strftime('%d/%m/%Y')}  {wd.type.value}{extra}  {format_brl(wd.value)}")
    return 0


async def cmd_add_employee(args: argparse.Namespace, session: RosterSession) -> int:
    await session.refresh()
    employee_id = await session.save_employee(_fields_from_args(args))
    print(f"Funcionário criado: {employee_id}")
    return 0


async def cmd_edit_employee(args: argparse.Namespace, session: RosterSession) -> int:
    await session.refresh()
    current = session.employee(args.employee_id)
    await session.save_employee(_fields_from_args(args, current.fields()), editing_id=current.id)
    print("Funcionário atualizado.")
    return 0


async def cmd_set_days(args: argparse.Namespace, session: RosterSession) -> int:
    await session.refresh()
    month = Month.parse(args.month)
    selections = parse_day_specs(month, args.days)
    await session.save_month(args.employee_id, selections, month)
    print(f"{len(selections)} diárias salvas em {month.label_pt()}.")
    return 0


async def cmd_remove_day(args: argparse.Namespace, session: RosterSession) -> int:
    await session.refresh()
    await session.remove_work_day(args.employee_id, args.day)
    print("Diária removida.")
    return 0


async def cmd_delete(args: argparse.Namespace, session: RosterSession) -> int:
    await session.delete_employee(args.employee_id)
    print("Funcionário excluído.")
    return 0


async def cmd_export(args: argparse.Namespace, session: RosterSession) -> int:
    await session.refresh()
    month = Month.parse(args.month)
    path = await session.export_month(args.employee_id, month, args.out)
    if path is None:
        print(f"Nenhuma diária em {month.label_pt()} para exportar.")
    else:
        print(f"Planilha salva em {path}")
    return 0


async def cmd_prefs(args: argparse.Namespace) -> int:
    store = PreferenceStore()
    prefs = store.toggle_theme() if args.toggle_theme else store.update(theme=args.theme, view_mode=args.view)
    print(f"tema={prefs.theme} visualização={prefs.view_mode}")
    return 0


SESSION_COMMANDS = {
    "list": cmd_list,
    "add-employee": cmd_add_employee,
    "edit-employee": cmd_edit_employee,
    "set-days": cmd_set_days,
    "remove-day": cmd_remove_day,
    "delete": cmd_delete,
    "export": cmd_export,
}
LOCAL_COMMANDS = {"login": cmd_login, "logout": cmd_logout, "prefs": cmd_prefs}


def _add_employee_options(p: argparse.ArgumentParser, required: bool) -> None:
    p.add_argument("--name", required=required)
    p.add_argument("--artistic-name", dest="artistic_name", required=required)
    p.add_argument("--level", type=parse_level)
    p.add_argument("--daily", help="valor da diária comum")
    p.add_argument("--party", help="valor da diária de festa")
    p.add_argument("--extra", help="valor da hora extra")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="diarias", description="Controle de diárias da equipe de recreação.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="entrar e guardar o token")
    p.add_argument("--username")
    p.add_argument("--register", action="store_true", help="criar a conta antes de entrar")
    sub.add_parser("logout", help="esquecer o token salvo")

    p = sub.add_parser("list", help="listar funcionários e o total do mês")
    p.add_argument("--search")
    p.add_argument("--sort", choices=SORT_KEYS, default="name")
    p.add_argument("--desc", action="store_true")
    p.add_argument("--month", help="YYYY-MM (padrão: mês atual)")
    p.add_argument("--details", action="store_true", help="mostrar as diárias do mês")

    _add_employee_options(sub.add_parser("add-employee", help="cadastrar funcionário"), required=True)
    p = sub.add_parser("edit-employee", help="alterar dados do funcionário")
    p.add_argument("employee_id")
    _add_employee_options(p, required=False)

    p = sub.add_parser("set-days", help="substituir as diárias de um mês")
    p.add_argument("employee_id")
    p.add_argument("month", help="YYYY-MM")
    p.add_argument("days", nargs="*", help="DIA[f][+HORAS], ex.: 5 12f 20+2")

    p = sub.add_parser("remove-day", help="remover uma diária")
    p.add_argument("employee_id")
    p.add_argument("day", help="YYYY-MM-DD")

    p = sub.add_parser("delete", help="excluir funcionário")
    p.add_argument("employee_id")

    p = sub.add_parser("export", help="exportar o mês para .xlsx")
    p.add_argument("employee_id")
    p.add_argument("month", help="YYYY-MM")
    p.add_argument("--out", default=".")

    p = sub.add_parser("prefs", help="tema e modo de visualização")
    p.add_argument("--theme", choices=("light", "dark"))
    p.add_argument("--view", choices=("card", "list"))
    p.add_argument("--toggle-theme", action="store_true")
    return parser


async def _run(args: argparse.Namespace) -> int:
    if args.command in LOCAL_COMMANDS:
        return await LOCAL_COMMANDS[args.command](args)

    session = RosterSession()
    try:
        await _authenticate(session)
        return await SESSION_COMMANDS[args.command](args, session)
    finally:
        await session.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Parse CLI arguments and dispatch to the requested command."""

    logging.config.dictConfig(LOGGING_CONFIG)
    parser = build_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    try:
        return asyncio.run(_run(args))
    except EmployeeValidationError as exc:
        print(f"Erro de validação: {exc}", file=sys.stderr)
    except UnknownEmployeeError as exc:
        print(f"Funcionário não encontrado: {exc}", file=sys.stderr)
    except AuthError as exc:
        print(f"Autenticação: {exc}", file=sys.stderr)
    except APIError as exc:
        print(f"Erro: {exc}", file=sys.stderr)
    except ValueError as exc:
        print(f"Entrada inválida: {exc}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
