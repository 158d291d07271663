class BaseErroCore(Exception):
    """Classe base para todas as exceções da Camada Core."""
    def __init__(self, message="Erro na regra de negócio."):
        self.message = message
        super().__init__(self.message)

# ===============================================
# ERROS DE VALIDAÇÃO
# ===============================================

class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando dados inválidos são fornecidos."""
    def __init__(self, message="Os dados fornecidos são inválidos.", campos=None):
        self.campos = campos or {}
        super().__init__(message)

class ComposicaoBoxInvalidaError(DadosInvalidosError):
    """Box sem componentes, com mais de três ou contendo outro Box."""
    def __init__(self, message="A composição do Box é inválida."):
        super().__init__(message, campos={'itens': message})

class CepInvalidoError(DadosInvalidosError):
    def __init__(self, message="O CEP deve conter 8 dígitos."):
        super().__init__(message, campos={'cep': message})

class CarrinhoVazioError(DadosInvalidosError):
    """Erro levantado ao tentar lançar uma venda sem itens."""
    def __init__(self, message="O carrinho de compras está vazio."):
        super().__init__(message, campos={'itens': message})

class EstoqueInsuficienteError(DadosInvalidosError):
    """Erro levantado quando a quantidade solicitada excede o estoque."""
    def __init__(self, livro_id: str, estoque_atual: int, quantidade_solicitada: int, message=None):
        self.livro_id = livro_id
        self.estoque_atual = estoque_atual
        self.quantidade_solicitada = quantidade_solicitada
        if message is None:
            message = (f"Estoque insuficiente para o livro {livro_id}. "
                       f"Disponível: {estoque_atual}, Solicitado: {quantidade_solicitada}.")
        super().__init__(message)

# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        super().__init__(message)

class LivroNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, message="O livro solicitado não foi encontrado."):
        super().__init__(message)

class VendedorNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, message="O vendedor solicitado não foi encontrado."):
        super().__init__(message)

class PedidoNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, message="O pedido solicitado não foi encontrado."):
        super().__init__(message)

class ContaNaoEncontradaError(ItemNaoEncontradoError):
    pass

class PersistenciaError(BaseErroCore):
    """Falha de comunicação com o armazenamento remoto."""
    def __init__(self, message="Falha ao acessar o armazenamento remoto."):
        super().__init__(message)

# ===============================================
# ERROS DO CICLO DE VIDA DO PEDIDO
# ===============================================

class TransicaoInvalidaError(BaseErroCore):
    """Transição de status fora de ordem para o pedido."""
    def __init__(self, message="Transição de status inválida para o pedido."):
        super().__init__(message)

class ComprovanteAusenteError(TransicaoInvalidaError):
    def __init__(self, message="O comprovante de pagamento é obrigatório para confirmar o pedido."):
        super().__init__(message)

class CodigoRastreioAusenteError(TransicaoInvalidaError):
    def __init__(self, message="O código de rastreio é obrigatório para despachar o pedido."):
        super().__init__(message)

class DescontoBloqueadoError(TransicaoInvalidaError):
    def __init__(self, message="O desconto só pode ser alterado enquanto o pedido aguarda pagamento."):
        super().__init__(message)

# ===============================================
# ERROS DE ACESSO
# ===============================================

class CredenciaisInvalidasError(BaseErroCore):
    def __init__(self, message="Credenciais incorretas."):
        super().__init__(message)

class AcessoNegadoError(BaseErroCore):
    def __init__(self, message="Você não tem permissão para executar esta operação."):
        super().__init__(message)
