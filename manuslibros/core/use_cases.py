# manuslibros/core/use_cases.py
"""
Implementação dos Casos de Uso (Lógica de Negócio) da aplicação.
Esta camada depende apenas das Entidades, Regras e Portas (Interfaces) do Core.

Todo caso de uso segue o mesmo ciclo: carrega a coleção inteira do repositório,
aplica as regras sobre as entidades e grava a coleção inteira de volta.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from manuslibros.core import frete, regras, relatorios
from manuslibros.core.entities import (
    Cliente, Conta, ItemCarrinho, Livro, Orcamento, Painel, Papel, Pedido, Relatorio,
    StatusPedido, TipoFrete, Vendedor
)
from manuslibros.core.exceptions import (
    AcessoNegadoError,
    CarrinhoVazioError,
    ContaNaoEncontradaError,
    CredenciaisInvalidasError,
    DadosInvalidosError,
    LivroNaoEncontradoError,
    PedidoNaoEncontradoError,
    VendedorNaoEncontradoError,
)
from manuslibros.core.ports import (
    IContaRepository,
    IHasherSenha,
    ILivroRepository,
    IPedidoRepository,
    IVendedorRepository,
)

logger = logging.getLogger(__name__)

TAXA_COMISSAO_PADRAO = Decimal('15')


def _localizar(colecao: Sequence, item_id: str):
    return next((item for item in colecao if item.id == item_id), None)


# ====================================================================
# 1. CASOS DE USO DO CATÁLOGO
# ====================================================================

class GerenciarCatalogoUseCase:
    """Cadastro, edição e remoção de livros avulsos e Boxes."""
    def __init__(self, livro_repo: ILivroRepository):
        self.livro_repo = livro_repo

    def listar(self, busca: Optional[str] = None) -> List[Livro]:
        """Retorna o acervo ordenado por título, com busca textual opcional."""
        livros = self.livro_repo.buscar_todos()
        if busca:
            termo = busca.strip().lower()
            livros = [livro for livro in livros if termo in livro.titulo.lower()]
        return sorted(livros, key=lambda livro: livro.titulo.lower())

    def adicionar(self, dados: dict) -> Livro:
        livros = self.livro_repo.buscar_todos()
        novo = regras.montar_livro(dados, livros)
        self.livro_repo.salvar_todos(livros + [novo])
        logger.info("Livro %s cadastrado (%s).", novo.id, 'Box' if novo.is_box else 'avulso')
        return novo

    def editar(self, livro_id: str, dados: dict) -> Livro:
        livros = self.livro_repo.buscar_todos()
        if _localizar(livros, livro_id) is None:
            raise LivroNaoEncontradoError(f"Livro ID {livro_id} não encontrado.")

        atualizado = regras.montar_livro(dados, livros, livro_id=livro_id)
        self.livro_repo.salvar_todos([atualizado if livro.id == livro_id else livro for livro in livros])
        logger.info("Livro %s atualizado.", livro_id)
        return atualizado

    def deletar(self, livro_id: str) -> None:
        """Remoção incondicional: Boxes e pedidos que citam o livro permanecem como estão."""
        livros = self.livro_repo.buscar_todos()
        restantes = [livro for livro in livros if livro.id != livro_id]
        if len(restantes) == len(livros):
            raise LivroNaoEncontradoError(f"Livro ID {livro_id} não encontrado.")
        self.livro_repo.salvar_todos(restantes)
        logger.info("Livro %s removido do acervo.", livro_id)


# ====================================================================
# 2. CASOS DE USO DE CONTAS E VENDEDORES
# ====================================================================

class _ContasMixin:
    """Acesso à lista unificada de contas (administradores + vendedores)."""
    conta_repo: IContaRepository
    vendedor_repo: IVendedorRepository

    def _todas_as_contas(self) -> List[Conta]:
        return list(self.conta_repo.buscar_todos()) + list(self.vendedor_repo.buscar_todos())

    def _exigir_username_livre(self, username: str, ignorar_id: Optional[str] = None):
        normalizado = username.strip().lower()
        for conta in self._todas_as_contas():
            if conta.id != ignorar_id and conta.username.lower() == normalizado:
                raise DadosInvalidosError(
                    f"O usuário '{username}' já está em uso.", campos={'username': 'já cadastrado'}
                )


def _validar_taxa(bruto) -> Decimal:
    taxa = regras.para_decimal(bruto, 'taxa_comissao')
    if taxa < 0 or taxa > 100:
        raise DadosInvalidosError(
            "A taxa de comissão deve estar entre 0 e 100.", campos={'taxa_comissao': 'fora do intervalo'}
        )
    return taxa


class GerenciarVendedoresUseCase(_ContasMixin):
    """Cadastro da equipe de vendas (acesso administrativo)."""
    CAMPOS_OBRIGATORIOS = ('username', 'nome', 'senha')

    def __init__(self, vendedor_repo: IVendedorRepository, conta_repo: IContaRepository, hasher: IHasherSenha):
        self.vendedor_repo = vendedor_repo
        self.conta_repo = conta_repo
        self.hasher = hasher

    def listar(self) -> List[Vendedor]:
        return sorted(self.vendedor_repo.buscar_todos(), key=lambda v: v.nome.lower())

    def adicionar(self, dados: dict) -> Vendedor:
        faltando = {campo: 'obrigatório' for campo in self.CAMPOS_OBRIGATORIOS if not (dados.get(campo) or '').strip()}
        if faltando:
            raise DadosInvalidosError("Preencha usuário, nome e senha do vendedor.", campos=faltando)

        username = dados['username'].strip()
        self._exigir_username_livre(username)
        taxa = dados.get('taxa_comissao')
        vendedor = Vendedor(
            username=username,
            senha=self.hasher.gerar_hash(dados['senha']),
            nome=dados['nome'].strip(),
            avatar=dados.get('avatar') or None,
            email=dados.get('email') or '',
            telefone=dados.get('telefone') or '',
            conta_bancaria=dados.get('conta_bancaria') or '',
            taxa_comissao=TAXA_COMISSAO_PADRAO if taxa in (None, '') else _validar_taxa(taxa),
        )

        self.vendedor_repo.salvar_todos(self.vendedor_repo.buscar_todos() + [vendedor])
        logger.info("Vendedor %s (%s) cadastrado.", vendedor.id, vendedor.username)
        return vendedor

    def editar(self, vendedor_id: str, dados: dict) -> Vendedor:
        vendedores = self.vendedor_repo.buscar_todos()
        vendedor = _localizar(vendedores, vendedor_id)
        if vendedor is None:
            raise VendedorNaoEncontradoError(f"Vendedor ID {vendedor_id} não encontrado.")

        if 'username' in dados:
            username = (dados['username'] or '').strip()
            if not username:
                raise DadosInvalidosError("O usuário é obrigatório.", campos={'username': 'obrigatório'})
            self._exigir_username_livre(username, ignorar_id=vendedor_id)
            vendedor.username = username
        if 'nome' in dados:
            nome = (dados['nome'] or '').strip()
            if not nome:
                raise DadosInvalidosError("O nome é obrigatório.", campos={'nome': 'obrigatório'})
            vendedor.nome = nome
        if 'taxa_comissao' in dados:
            vendedor.taxa_comissao = _validar_taxa(dados['taxa_comissao'])
        for campo in ('email', 'telefone', 'conta_bancaria'):
            if campo in dados:
                setattr(vendedor, campo, dados[campo] or '')
        if 'avatar' in dados:
            vendedor.avatar = dados['avatar'] or None
        # Senha em branco mantém a atual
        if dados.get('senha'):
            vendedor.senha = self.hasher.gerar_hash(dados['senha'])

        self.vendedor_repo.salvar_todos(vendedores)
        logger.info("Vendedor %s atualizado.", vendedor_id)
        return vendedor

    def deletar(self, vendedor_id: str) -> None:
        """O histórico de pedidos é preservado; o relatório passa a exibir 'Vendedor Inativo'."""
        vendedores = self.vendedor_repo.buscar_todos()
        restantes = [v for v in vendedores if v.id != vendedor_id]
        if len(restantes) == len(vendedores):
            raise VendedorNaoEncontradoError(f"Vendedor ID {vendedor_id} não encontrado.")
        self.vendedor_repo.salvar_todos(restantes)
        logger.info("Vendedor %s removido.", vendedor_id)


class AutenticarUseCase(_ContasMixin):
    """Login único para administradores e vendedores."""
    def __init__(self, conta_repo: IContaRepository, vendedor_repo: IVendedorRepository, hasher: IHasherSenha):
        self.conta_repo = conta_repo
        self.vendedor_repo = vendedor_repo
        self.hasher = hasher

    def executar(self, username: str, senha: str) -> Conta:
        username = (username or '').strip().lower()
        conta = next((c for c in self._todas_as_contas() if c.username.lower() == username), None)
        if conta is None or not senha or not self.hasher.verificar(senha, conta.senha):
            logger.info("Tentativa de login recusada para '%s'.", username)
            raise CredenciaisInvalidasError()
        return conta

    def obter_conta(self, conta_id: str) -> Conta:
        conta = _localizar(self._todas_as_contas(), conta_id)
        if conta is None:
            raise ContaNaoEncontradaError(f"Conta ID {conta_id} não encontrada.")
        return conta


class AtualizarPerfilUseCase(_ContasMixin):
    """Atualização dos dados da conta logada (nome, foto, contato e senha)."""
    def __init__(self, conta_repo: IContaRepository, vendedor_repo: IVendedorRepository, hasher: IHasherSenha):
        self.conta_repo = conta_repo
        self.vendedor_repo = vendedor_repo
        self.hasher = hasher

    def executar(self, conta_id: str, dados: dict) -> Conta:
        vendedores = self.vendedor_repo.buscar_todos()
        conta = _localizar(vendedores, conta_id)
        repo, colecao = self.vendedor_repo, vendedores
        if conta is None:
            colecao = self.conta_repo.buscar_todos()
            conta = _localizar(colecao, conta_id)
            repo = self.conta_repo
        if conta is None:
            raise ContaNaoEncontradaError(f"Conta ID {conta_id} não encontrada.")

        if 'nome' in dados:
            nome = (dados['nome'] or '').strip()
            if not nome:
                raise DadosInvalidosError("O nome é obrigatório.", campos={'nome': 'obrigatório'})
            conta.nome = nome
        if 'avatar' in dados:
            conta.avatar = dados['avatar'] or None
        if isinstance(conta, Vendedor):
            for campo in ('email', 'telefone'):
                if campo in dados:
                    setattr(conta, campo, dados[campo] or '')
        if dados.get('senha'):
            conta.senha = self.hasher.gerar_hash(dados['senha'])

        repo.salvar_todos(colecao)
        logger.info("Perfil da conta %s atualizado.", conta_id)
        return conta


# ====================================================================
# 3. CASOS DE USO DE PEDIDO
# ====================================================================

def _resolver_vendedor(conta: Conta, vendedor_id: Optional[str], vendedores: Sequence[Vendedor]) -> Optional[Vendedor]:
    """Vendedores sempre vendem em nome próprio; o administrador pode atribuir a venda."""
    if conta.papel == Papel.SELLER:
        vendedor_id = conta.id
    if not vendedor_id:
        return None
    vendedor = _localizar(vendedores, vendedor_id)
    if vendedor is None:
        raise VendedorNaoEncontradoError(f"Vendedor ID {vendedor_id} não encontrado.")
    return vendedor


class OrcarPedidoUseCase:
    """Calcula a prévia de um pedido sem persistir nada."""
    def __init__(self, livro_repo: ILivroRepository, vendedor_repo: IVendedorRepository):
        self.livro_repo = livro_repo
        self.vendedor_repo = vendedor_repo

    def executar(
        self,
        conta: Conta,
        carrinho: Sequence[ItemCarrinho],
        cep: Optional[str] = None,
        tipo_frete=TipoFrete.SIMPLES,
        desconto=Decimal('0'),
        vendedor_id: Optional[str] = None,
    ) -> Orcamento:
        if not carrinho:
            raise CarrinhoVazioError()

        desconto = regras.para_decimal(desconto, 'desconto')
        if desconto < 0:
            raise DadosInvalidosError("O desconto não pode ser negativo.", campos={'desconto': 'inválido'})

        tipo_frete = TipoFrete(tipo_frete)
        valor_frete = frete.cotar(cep, tipo_frete).valor if cep else Decimal('0')

        itens = regras.montar_itens_pedido(carrinho, self.livro_repo.buscar_todos())
        totais = regras.calcular_totais_carrinho(itens, desconto, valor_frete)
        vendedor = _resolver_vendedor(conta, vendedor_id, self.vendedor_repo.buscar_todos())
        comissao = regras.calcular_comissao(totais.lucro_total, vendedor.taxa_comissao) if vendedor else Decimal('0')

        return Orcamento(
            itens=itens,
            totais=totais,
            tipo_frete=tipo_frete,
            valor_frete=valor_frete,
            desconto=desconto,
            comissao_estimada=comissao,
            vendedor_id=vendedor.id if vendedor else None,
        )


class CriarPedidoUseCase:
    """
    Lança uma venda: valida o cliente, cota o frete pelo CEP, congela preços e
    custos dos itens e grava o pedido como aguardando pagamento.
    O estoque só é baixado na confirmação do pagamento.
    """
    CAMPOS_CLIENTE = ('nome', 'endereco', 'cep', 'telefone')

    def __init__(self, livro_repo: ILivroRepository, pedido_repo: IPedidoRepository, vendedor_repo: IVendedorRepository):
        self.pedido_repo = pedido_repo
        self.orcar = OrcarPedidoUseCase(livro_repo, vendedor_repo)

    def executar(
        self,
        conta: Conta,
        dados_cliente: dict,
        carrinho: Sequence[ItemCarrinho],
        tipo_frete=TipoFrete.SIMPLES,
        desconto=Decimal('0'),
        vendedor_id: Optional[str] = None,
    ) -> Pedido:
        faltando = {
            campo: 'obrigatório' for campo in self.CAMPOS_CLIENTE
            if not str(dados_cliente.get(campo) or '').strip()
        }
        if faltando:
            raise DadosInvalidosError("Preencha os dados obrigatórios do cliente.", campos=faltando)

        cliente = Cliente(
            nome=dados_cliente['nome'].strip(),
            endereco=dados_cliente['endereco'].strip(),
            cep=frete.limpar_cep(dados_cliente['cep']),
            telefone=dados_cliente['telefone'].strip(),
            email=(dados_cliente.get('email') or '').strip(),
        )
        orcamento = self.orcar.executar(conta, carrinho, cliente.cep, tipo_frete, desconto, vendedor_id)

        pedido = Pedido(
            cliente=cliente,
            itens=orcamento.itens,
            tipo_frete=orcamento.tipo_frete,
            valor_frete=orcamento.valor_frete,
            desconto=orcamento.desconto,
            valor_total=orcamento.totais.valor_final,
            custo_total=orcamento.totais.custo_total,
            lucro_total=orcamento.totais.lucro_total,
            comissao_vendedor=orcamento.comissao_estimada,
            vendedor_id=orcamento.vendedor_id,
        )

        self.pedido_repo.salvar_todos(self.pedido_repo.buscar_todos() + [pedido])
        logger.info("Pedido %s criado (vendedor=%s, total=%s).", pedido.id, pedido.vendedor_id, pedido.valor_total)
        return pedido


class ConfirmarPagamentoUseCase:
    """PENDING_PAYMENT → CONFIRMED: anexa o comprovante PIX e baixa o estoque."""
    def __init__(self, pedido_repo: IPedidoRepository, livro_repo: ILivroRepository):
        self.pedido_repo = pedido_repo
        self.livro_repo = livro_repo

    def executar(self, pedido_id: str, comprovante: Optional[str]) -> Pedido:
        pedidos = self.pedido_repo.buscar_todos()
        pedido = _localizar(pedidos, pedido_id)
        if pedido is None:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")

        livros = self.livro_repo.buscar_todos()
        truncados = regras.confirmar_pagamento(pedido, comprovante, livros)
        for livro_id in truncados:
            logger.warning("Estoque do livro %s insuficiente ao confirmar o pedido %s; ajustado para zero.",
                           livro_id, pedido_id)

        self.livro_repo.salvar_todos(livros)
        self.pedido_repo.salvar_todos(pedidos)
        logger.info("Pagamento do pedido %s confirmado.", pedido_id)
        return pedido


class DespacharPedidoUseCase:
    """CONFIRMED → SHIPPED: registra o código de rastreio e a etiqueta de envio."""
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    def executar(self, pedido_id: str, codigo_rastreio: Optional[str], documento_envio: Optional[str] = None) -> Pedido:
        pedidos = self.pedido_repo.buscar_todos()
        pedido = _localizar(pedidos, pedido_id)
        if pedido is None:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")

        regras.despachar_pedido(pedido, codigo_rastreio, documento_envio)
        self.pedido_repo.salvar_todos(pedidos)
        logger.info("Pedido %s despachado (rastreio %s).", pedido_id, pedido.codigo_rastreio)
        return pedido


class AjustarDescontoUseCase:
    """Altera o desconto de um pedido ainda não pago e recalcula os valores derivados."""
    def __init__(self, pedido_repo: IPedidoRepository, vendedor_repo: IVendedorRepository):
        self.pedido_repo = pedido_repo
        self.vendedor_repo = vendedor_repo

    def executar(self, conta: Conta, pedido_id: str, novo_desconto) -> Pedido:
        pedidos = self.pedido_repo.buscar_todos()
        pedido = _localizar(pedidos, pedido_id)
        if pedido is None:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")
        if conta.papel == Papel.SELLER and pedido.vendedor_id != conta.id:
            raise AcessoNegadoError("Vendedores só podem alterar os próprios pedidos.")

        taxa = None
        if pedido.vendedor_id:
            vendedor = _localizar(self.vendedor_repo.buscar_todos(), pedido.vendedor_id)
            if vendedor is None:
                logger.debug("Vendedor %s do pedido %s não existe mais; comissão zerada.",
                             pedido.vendedor_id, pedido_id)
            else:
                taxa = vendedor.taxa_comissao

        regras.ajustar_desconto(pedido, novo_desconto, taxa)
        self.pedido_repo.salvar_todos(pedidos)
        logger.info("Desconto do pedido %s alterado para %s.", pedido_id, pedido.desconto)
        return pedido


class ListarPedidosUseCase:
    """Consultas de pedidos. Vendedores enxergam apenas os próprios pedidos."""
    def __init__(self, pedido_repo: IPedidoRepository):
        self.pedido_repo = pedido_repo

    def listar(self, conta: Conta, busca: Optional[str] = None, status: Optional[str] = None) -> List[Pedido]:
        pedidos = self.pedido_repo.buscar_todos()
        if conta.papel == Papel.SELLER:
            pedidos = [p for p in pedidos if p.vendedor_id == conta.id]
        if status:
            status = StatusPedido(status)
            pedidos = [p for p in pedidos if p.status == status]
        if busca:
            termo = busca.strip().lower()
            pedidos = [p for p in pedidos if termo in p.cliente.nome.lower() or termo in p.id.lower()]
        return sorted(pedidos, key=lambda p: p.data, reverse=True)

    def detalhar(self, conta: Conta, pedido_id: str) -> Pedido:
        pedido = _localizar(self.pedido_repo.buscar_todos(), pedido_id)
        if pedido is None:
            raise PedidoNaoEncontradoError(f"Pedido ID {pedido_id} não encontrado.")
        if conta.papel == Papel.SELLER and pedido.vendedor_id != conta.id:
            raise AcessoNegadoError("Vendedores só podem consultar os próprios pedidos.")
        return pedido

    def listar_envios_pendentes(self) -> List[Pedido]:
        """Pedidos pagos aguardando despacho, do mais antigo para o mais recente."""
        pendentes = [p for p in self.pedido_repo.buscar_todos() if p.status == StatusPedido.CONFIRMED]
        return sorted(pendentes, key=lambda p: p.data)

    def listar_envios_recentes(self, limite: int = 10) -> List[Pedido]:
        enviados = [p for p in self.pedido_repo.buscar_todos() if p.status == StatusPedido.SHIPPED]
        return sorted(enviados, key=lambda p: p.data, reverse=True)[:limite]


# ====================================================================
# 4. CASOS DE USO DE RELATÓRIOS
# ====================================================================

class GerarRelatorioUseCase:
    def __init__(self, pedido_repo: IPedidoRepository, vendedor_repo: IVendedorRepository):
        self.pedido_repo = pedido_repo
        self.vendedor_repo = vendedor_repo

    def executar(
        self,
        inicio: Optional[date] = None,
        fim: Optional[date] = None,
        filtro_vendedor: Optional[str] = relatorios.FILTRO_TODOS,
    ) -> Relatorio:
        if inicio and fim and inicio > fim:
            raise DadosInvalidosError("A data inicial é posterior à data final.", campos={'inicio': 'inválido'})
        return relatorios.gerar_relatorio(
            self.pedido_repo.buscar_todos(),
            self.vendedor_repo.buscar_todos(),
            inicio=inicio,
            fim=fim,
            filtro_vendedor=filtro_vendedor,
        )


class PainelUseCase:
    def __init__(self, pedido_repo: IPedidoRepository, vendedor_repo: IVendedorRepository):
        self.pedido_repo = pedido_repo
        self.vendedor_repo = vendedor_repo

    def executar(self, conta: Conta) -> Painel:
        return relatorios.gerar_painel(self.pedido_repo.buscar_todos(), self.vendedor_repo.buscar_todos(), conta)
