import sys
import argparse
from os.path import abspath, dirname
from getpass import getpass

root_dir = dirname(dirname(abspath(__file__)))
sys.path.append(root_dir)

from fastapi import HTTPException
from pydantic import ValidationError

from app.db.session import SessionLocal
from app.services import usuario_service
from app.schemas.usuario import UsuarioCreate
from app.core.permissions import ALL_ROLES

# --- Funciones de Gestión ---

def create_user(db, nombre: str, email: str, rol: str, technician_id: str = None):
    """Crea un nuevo usuario en la base de datos. La contraseña se pide por consola."""
    print(f"Iniciando creación de usuario para el email: {email}")
    password = getpass("Introduce la contraseña para el nuevo usuario: ")
    try:
        user_in = UsuarioCreate(
            nombre=nombre, email=email, password=password, rol=rol, technician_id=technician_id
        )
    except ValidationError as e:
        print(f"❌ Error: datos inválidos ({e.error_count()} errores). La contraseña debe tener al menos 8 caracteres.")
        return
    try:
        usuario_service.create(db, obj_in=user_in)
        db.commit()
        print(f"✅ ¡Usuario '{nombre}' con rol '{rol}' creado exitosamente!")
    except HTTPException as e:
        db.rollback()
        print(f"❌ Error: {e.detail}")
    except Exception as e:
        db.rollback()
        print(f"❌ Error inesperado al crear el usuario: {e}")

def deactivate_user(db, email: str):
    """Desactiva un usuario por su email; deja de poder iniciar sesión."""
    print(f"Intentando desactivar al usuario con email: {email}")
    user = usuario_service.get_by_email(db, email=email)
    if not user:
        print(f"⚠️ No se encontró ningún usuario con el email '{email}'.")
        return
    try:
        usuario_service.update(db, db_obj=user, obj_in={"is_active": False})
        db.commit()
        print(f"✅ Usuario con email '{email}' desactivado.")
    except Exception as e:
        db.rollback()
        print(f"❌ Error al desactivar usuario: {e}")

def list_users(db):
    """Muestra una lista de todos los usuarios con su rol y estado."""
    print("\n--- LISTA DE USUARIOS ---")
    all_users = usuario_service.get_all(db)
    if not all_users:
        print("-> No se encontraron usuarios en la base de datos.")
        return
    print(f"{'ROL':<12} | {'ACTIVO':<6} | {'NOMBRE':<25} | {'EMAIL'}")
    print("-" * 80)
    for user in all_users:
        activo = "sí" if user.is_active else "no"
        print(f"{user.rol:<12} | {activo:<6} | {user.nombre:<25} | {user.email}")
    print("-" * 80)
    print(f"Total: {len(all_users)} usuarios.")

# --- Interfaz de Línea de Comandos Principal ---

def main():
    parser = argparse.ArgumentParser(description="Herramienta CLI para gestionar los usuarios de Masirep.")
    subparsers = parser.add_subparsers(dest="command", help="Comandos disponibles", required=True)

    parser_create = subparsers.add_parser("create", help="Crear un nuevo usuario.")
    parser_create.add_argument("--nombre", type=str, required=True, help="Nombre del usuario.")
    parser_create.add_argument("--email", type=str, required=True, help="Email del usuario (usado para iniciar sesión).")
    parser_create.add_argument("--rol", type=str, required=True, choices=ALL_ROLES, help="Rol del usuario.")
    parser_create.add_argument("--technician-id", type=str, default=None, help="Identificador de técnico (opcional).")

    parser_deactivate = subparsers.add_parser("deactivate", help="Desactivar un usuario existente.")
    parser_deactivate.add_argument("--email", type=str, required=True, help="Email del usuario a desactivar.")

    subparsers.add_parser("list-users", help="Mostrar una lista de todos los usuarios.")

    args = parser.parse_args()
    db = SessionLocal()
    try:
        if args.command == "create":
            create_user(db, nombre=args.nombre, email=args.email, rol=args.rol, technician_id=args.technician_id)
        elif args.command == "deactivate":
            deactivate_user(db, email=args.email)
        elif args.command == "list-users":
            list_users(db)
    finally:
        db.close()

if __name__ == "__main__":
    main()
