"""
Creacion inicial de la base de datos de Masirep

Revision ID: 3f1c9a2e7b10
Revises:
Create Date: 2026-10-18 10:12:31.104522

Descripción:
Usuarios, jerarquía de almacenamiento (ubicaciones > armarios/estanterías >
estantes/cajones/divisiones/organizadores > cajoncitos), repuestos con sus
ubicaciones y equipos, y componentes electrónicos por cajoncito.
"""
from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c9a2e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UNA_UBICACION = " + ".join(
    f"(CASE WHEN {columna} IS NOT NULL THEN 1 ELSE 0 END)"
    for columna in ("armario_id", "estanteria_id", "estante_id", "cajon_id", "division_id", "cajoncito_id")
) + " = 1"


def _timestamps() -> List[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _nodo(tabla: str, *extra: sa.SchemaItem) -> None:
    """Crea una tabla de la jerarquía con las columnas comunes de un nodo."""
    op.create_table(tabla,
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('codigo', sa.String(length=50), nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        *extra,
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f(f'pk_{tabla}')),
    )


def upgrade() -> None:
    """
    Ejecuta todos los comandos para construir la base de datos desde cero.
    """
    # === USUARIOS ===
    op.create_table('usuarios',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('technician_id', sa.String(length=50), nullable=True),
        sa.Column('rol', sa.String(length=20), server_default='tecnico', nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('ultimo_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("rol IN ('tecnico', 'supervisor', 'admin')", name=op.f('ck_usuarios_rol_valido')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_usuarios')),
        sa.UniqueConstraint('technician_id', name=op.f('uq_usuarios_technician_id')),
    )
    op.create_index(op.f('ix_usuarios_email'), 'usuarios', ['email'], unique=True)

    # === JERARQUÍA DE ALMACENAMIENTO ===
    op.create_table('ubicaciones',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('codigo', sa.String(length=50), nullable=False),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_ubicaciones')),
    )
    op.create_index(op.f('ix_ubicaciones_codigo'), 'ubicaciones', ['codigo'], unique=True)

    for tabla in ('armarios', 'estanterias'):
        _nodo(tabla,
            sa.Column('ubicacion_id', sa.Uuid(), nullable=False),
            sa.ForeignKeyConstraint(['ubicacion_id'], ['ubicaciones.id'], name=op.f(f'fk_{tabla}_ubicacion_id_ubicaciones')),
            sa.UniqueConstraint('ubicacion_id', 'codigo', name=f'uq_{tabla}_ubicacion_codigo'),
        )
        op.create_index(op.f(f'ix_{tabla}_ubicacion_id'), tabla, ['ubicacion_id'], unique=False)

    _nodo('estantes',
        sa.Column('estanteria_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['estanteria_id'], ['estanterias.id'], name=op.f('fk_estantes_estanteria_id_estanterias')),
        sa.UniqueConstraint('estanteria_id', 'codigo', name='uq_estantes_estanteria_codigo'),
    )
    op.create_index(op.f('ix_estantes_estanteria_id'), 'estantes', ['estanteria_id'], unique=False)

    # Cajones y organizadores cuelgan de un armario o de una estantería, nunca de ambos
    for tabla in ('cajones', 'organizadores'):
        _nodo(tabla,
            sa.Column('armario_id', sa.Uuid(), nullable=True),
            sa.Column('estanteria_id', sa.Uuid(), nullable=True),
            sa.CheckConstraint('(armario_id IS NULL) <> (estanteria_id IS NULL)', name=op.f(f'ck_{tabla}_un_contenedor')),
            sa.ForeignKeyConstraint(['armario_id'], ['armarios.id'], name=op.f(f'fk_{tabla}_armario_id_armarios')),
            sa.ForeignKeyConstraint(['estanteria_id'], ['estanterias.id'], name=op.f(f'fk_{tabla}_estanteria_id_estanterias')),
            sa.UniqueConstraint('armario_id', 'codigo', name=f'uq_{tabla}_armario_codigo'),
            sa.UniqueConstraint('estanteria_id', 'codigo', name=f'uq_{tabla}_estanteria_codigo'),
        )
        op.create_index(op.f(f'ix_{tabla}_armario_id'), tabla, ['armario_id'], unique=False)
        op.create_index(op.f(f'ix_{tabla}_estanteria_id'), tabla, ['estanteria_id'], unique=False)

    _nodo('divisiones',
        sa.Column('cajon_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['cajon_id'], ['cajones.id'], name=op.f('fk_divisiones_cajon_id_cajones')),
        sa.UniqueConstraint('cajon_id', 'codigo', name='uq_divisiones_cajon_codigo'),
    )
    op.create_index(op.f('ix_divisiones_cajon_id'), 'divisiones', ['cajon_id'], unique=False)

    _nodo('cajoncitos',
        sa.Column('organizador_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['organizador_id'], ['organizadores.id'], name=op.f('fk_cajoncitos_organizador_id_organizadores')),
        sa.UniqueConstraint('organizador_id', 'codigo', name='uq_cajoncitos_organizador_codigo'),
    )
    op.create_index(op.f('ix_cajoncitos_organizador_id'), 'cajoncitos', ['organizador_id'], unique=False)

    # === EQUIPOS ===
    op.create_table('equipos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('codigo', sa.String(length=50), nullable=False),
        sa.Column('sap', sa.String(length=50), nullable=True),
        sa.Column('nombre', sa.String(length=100), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('marca', sa.String(length=100), nullable=True),
        sa.Column('modelo', sa.String(length=100), nullable=True),
        sa.Column('numero_serie', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_equipos')),
    )
    op.create_index(op.f('ix_equipos_codigo'), 'equipos', ['codigo'], unique=True)
    op.create_index(op.f('ix_equipos_sap'), 'equipos', ['sap'], unique=True)
    op.create_index(op.f('ix_equipos_nombre'), 'equipos', ['nombre'], unique=False)

    # === REPUESTOS ===
    op.create_table('repuestos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('codigo', sa.String(length=50), nullable=False),
        sa.Column('nombre', sa.String(length=200), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('marca', sa.String(length=100), nullable=True),
        sa.Column('modelo', sa.String(length=100), nullable=True),
        sa.Column('numero_parte', sa.String(length=100), nullable=True),
        sa.Column('categoria', sa.String(length=100), nullable=True),
        sa.Column('stock_minimo', sa.Integer(), server_default='0', nullable=False),
        sa.Column('stock_actual', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('stock_minimo >= 0', name=op.f('ck_repuestos_stock_minimo_no_negativo')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_repuestos')),
    )
    op.create_index(op.f('ix_repuestos_codigo'), 'repuestos', ['codigo'], unique=True)
    op.create_index(op.f('ix_repuestos_nombre'), 'repuestos', ['nombre'], unique=False)
    op.create_index(op.f('ix_repuestos_categoria'), 'repuestos', ['categoria'], unique=False)

    op.create_table('repuesto_ubicaciones',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('repuesto_id', sa.Uuid(), nullable=False),
        sa.Column('cantidad', sa.Integer(), nullable=False),
        sa.Column('armario_id', sa.Uuid(), nullable=True),
        sa.Column('estanteria_id', sa.Uuid(), nullable=True),
        sa.Column('estante_id', sa.Uuid(), nullable=True),
        sa.Column('cajon_id', sa.Uuid(), nullable=True),
        sa.Column('division_id', sa.Uuid(), nullable=True),
        sa.Column('cajoncito_id', sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(UNA_UBICACION, name=op.f('ck_repuesto_ubicaciones_una_ubicacion')),
        sa.CheckConstraint('cantidad >= 1', name=op.f('ck_repuesto_ubicaciones_cantidad_positiva')),
        sa.ForeignKeyConstraint(['repuesto_id'], ['repuestos.id'], name=op.f('fk_repuesto_ubicaciones_repuesto_id_repuestos'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['armario_id'], ['armarios.id'], name=op.f('fk_repuesto_ubicaciones_armario_id_armarios')),
        sa.ForeignKeyConstraint(['estanteria_id'], ['estanterias.id'], name=op.f('fk_repuesto_ubicaciones_estanteria_id_estanterias')),
        sa.ForeignKeyConstraint(['estante_id'], ['estantes.id'], name=op.f('fk_repuesto_ubicaciones_estante_id_estantes')),
        sa.ForeignKeyConstraint(['cajon_id'], ['cajones.id'], name=op.f('fk_repuesto_ubicaciones_cajon_id_cajones')),
        sa.ForeignKeyConstraint(['division_id'], ['divisiones.id'], name=op.f('fk_repuesto_ubicaciones_division_id_divisiones')),
        sa.ForeignKeyConstraint(['cajoncito_id'], ['cajoncitos.id'], name=op.f('fk_repuesto_ubicaciones_cajoncito_id_cajoncitos')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_repuesto_ubicaciones')),
    )
    for columna in ('repuesto_id', 'armario_id', 'estanteria_id', 'estante_id', 'cajon_id', 'division_id', 'cajoncito_id'):
        op.create_index(op.f(f'ix_repuesto_ubicaciones_{columna}'), 'repuesto_ubicaciones', [columna], unique=False)

    op.create_table('repuesto_equipos',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('repuesto_id', sa.Uuid(), nullable=False),
        sa.Column('equipo_id', sa.Uuid(), nullable=False),
        sa.Column('cantidad', sa.Integer(), server_default='1', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('cantidad >= 1', name=op.f('ck_repuesto_equipos_cantidad_positiva')),
        sa.ForeignKeyConstraint(['repuesto_id'], ['repuestos.id'], name=op.f('fk_repuesto_equipos_repuesto_id_repuestos'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['equipo_id'], ['equipos.id'], name=op.f('fk_repuesto_equipos_equipo_id_equipos'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_repuesto_equipos')),
        sa.UniqueConstraint('repuesto_id', 'equipo_id', name='uq_repuesto_equipos_repuesto_equipo'),
    )
    op.create_index(op.f('ix_repuesto_equipos_repuesto_id'), 'repuesto_equipos', ['repuesto_id'], unique=False)
    op.create_index(op.f('ix_repuesto_equipos_equipo_id'), 'repuesto_equipos', ['equipo_id'], unique=False)

    # === COMPONENTES ===
    op.create_table('componentes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('categoria', sa.String(length=20), nullable=False),
        sa.Column('descripcion', sa.String(length=500), nullable=False),
        sa.Column('valor_unidad', sa.JSON(), nullable=False),
        sa.Column('stock_minimo', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "categoria IN ('RESISTENCIA', 'CAPACITOR', 'INTEGRADO', 'VENTILADOR', 'OTROS')",
            name=op.f('ck_componentes_categoria_valida'),
        ),
        sa.CheckConstraint('stock_minimo >= 0', name=op.f('ck_componentes_stock_minimo_no_negativo')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_componentes')),
    )
    op.create_index(op.f('ix_componentes_categoria'), 'componentes', ['categoria'], unique=False)

    op.create_table('componente_ubicaciones',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('componente_id', sa.Uuid(), nullable=False),
        sa.Column('cajoncito_id', sa.Uuid(), nullable=False),
        sa.Column('cantidad', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('cantidad >= 1', name=op.f('ck_componente_ubicaciones_cantidad_positiva')),
        sa.ForeignKeyConstraint(['componente_id'], ['componentes.id'], name=op.f('fk_componente_ubicaciones_componente_id_componentes'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['cajoncito_id'], ['cajoncitos.id'], name=op.f('fk_componente_ubicaciones_cajoncito_id_cajoncitos')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_componente_ubicaciones')),
        sa.UniqueConstraint('componente_id', 'cajoncito_id', name='uq_componente_ubicaciones_componente_cajoncito'),
    )
    op.create_index(op.f('ix_componente_ubicaciones_componente_id'), 'componente_ubicaciones', ['componente_id'], unique=False)
    op.create_index(op.f('ix_componente_ubicaciones_cajoncito_id'), 'componente_ubicaciones', ['cajoncito_id'], unique=False)


def downgrade() -> None:
    """
    Elimina todas las tablas en orden inverso de dependencias.
    """
    for tabla in (
        'componente_ubicaciones', 'componentes',
        'repuesto_equipos', 'repuesto_ubicaciones', 'repuestos', 'equipos',
        'cajoncitos', 'divisiones', 'organizadores', 'cajones', 'estantes',
        'estanterias', 'armarios', 'ubicaciones', 'usuarios',
    ):
        op.drop_table(tabla)
