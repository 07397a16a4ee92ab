"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- TicketEntity <-> TicketModel
- ComentarioEntity <-> ComentarioModel

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados (enums <-> strings, JSON <-> listas)
"""

from typing import Iterable, List

from src.core.tickets.entities import ComentarioEntity, TicketEntity
from src.core.tickets.valores import TicketPriority, TicketStatus, TipoAutor

from .models import ComentarioModel, TicketModel


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    - to_model(): Entity → Model (não salva)
    - to_entity(): Model → Entity (sem passar pelas validações de criar())
    - campos_atualizados(): valores para QuerySet.update()
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        return TicketModel(
            id=entity.id,
            numero=entity.numero,
            versao=entity.versao,
            criado_em=entity.criado_em,
            **TicketMapper.campos_atualizados(entity),
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        return TicketEntity(
            id=model.id,
            numero=model.numero,
            titulo=model.titulo,
            descricao=model.descricao,
            setor=model.setor,
            tipo_problema=model.tipo_problema,
            status=TicketStatus(model.status),
            prioridade=TicketPriority(model.prioridade),
            solicitante_nome=model.solicitante_nome,
            solicitante_email=model.solicitante_email,
            atribuido_a_id=model.atribuido_a_id,
            criado_em=model.criado_em,
            aceito_em=model.aceito_em,
            resolvido_em=model.resolvido_em,
            atualizado_em=model.atualizado_em,
            anexos=list(model.anexos) if model.anexos else [],
            versao=model.versao,
        )

    @staticmethod
    def to_entity_list(models: Iterable[TicketModel]) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]

    @staticmethod
    def campos_atualizados(entity: TicketEntity) -> dict:
        return {
            'titulo': entity.titulo,
            'descricao': entity.descricao,
            'setor': entity.setor,
            'tipo_problema': entity.tipo_problema,
            'status': entity.status.value,
            'prioridade': entity.prioridade.value,
            'solicitante_nome': entity.solicitante_nome,
            'solicitante_email': entity.solicitante_email,
            'atribuido_a_id': entity.atribuido_a_id,
            'aceito_em': entity.aceito_em,
            'resolvido_em': entity.resolvido_em,
            'atualizado_em': entity.atualizado_em,
            'anexos': list(entity.anexos),
        }


class ComentarioMapper:
    @staticmethod
    def to_model(entity: ComentarioEntity) -> ComentarioModel:
        return ComentarioModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            conteudo=entity.conteudo,
            autor_nome=entity.autor_nome,
            tipo_autor=entity.tipo_autor.value,
            anexos=list(entity.anexos),
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: ComentarioModel) -> ComentarioEntity:
        return ComentarioEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            conteudo=model.conteudo,
            autor_nome=model.autor_nome,
            tipo_autor=TipoAutor(model.tipo_autor),
            anexos=list(model.anexos) if model.anexos else [],
            criado_em=model.criado_em,
        )
