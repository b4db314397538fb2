"""
Constantes de domínio do CRM de Infraestrutura.

Seções:
    - UNIDADES: Lojas e setores atendidos
    - ORDENS DE SERVIÇO: Status, prioridades e tipos
    - FINANCEIRO: Categorias de despesa e formas de pagamento
    - PATRIMÔNIO: Status e categorias padrão de bens
    - NOTIFICAÇÕES / TAREFAS
    - CSV: Cabeçalhos de importação e exportação
"""

# =============================================================================
# UNIDADES
# =============================================================================

UNIDADES = [
    'Aldeota',
    'Parquelândia',
    'Cambeba',
    'Eusébio',
    'Poke (Santos Dumont)',
    'Estoque',
    'Fábrica',
    'Administrativo',
]

# Unidade usada quando a importação não reconhece o valor informado
UNIDADE_PADRAO = 'Aldeota'


# =============================================================================
# ORDENS DE SERVIÇO
# =============================================================================

OS_ABERTA = 'Aberta'
OS_EM_ANDAMENTO = 'Em Andamento'
OS_AGUARDANDO = 'Aguardando'  # Orçamento/Peça/Prestador
OS_CONCLUIDA = 'Concluída'
OS_CANCELADA = 'Cancelada'

STATUS_OS = [OS_ABERTA, OS_EM_ANDAMENTO, OS_AGUARDANDO, OS_CONCLUIDA, OS_CANCELADA]

PRIORIDADES_OS = ['Alta', 'Média', 'Baixa']
PRIORIDADE_OS_PADRAO = 'Média'

TIPOS_OS = ['Corretiva', 'Preventiva', 'Instalação', 'Outros']
TIPO_OS_PADRAO = 'Corretiva'


# =============================================================================
# FINANCEIRO
# =============================================================================

CATEGORIAS_DESPESA = ['Peças', 'Mão de Obra', 'Outros']

FORMAS_PAGAMENTO = ['À vista', 'Boleto', 'Pix', 'Cartão de Crédito', 'Outros']


# =============================================================================
# PATRIMÔNIO
# =============================================================================

BEM_ATIVO = 'Ativo'
BEM_EM_MANUTENCAO = 'Em Manutenção'
BEM_BAIXADO = 'Baixado'
BEM_INATIVO = 'Inativo'

STATUS_BEM = [BEM_ATIVO, BEM_EM_MANUTENCAO, BEM_BAIXADO, BEM_INATIVO]

# Só bens nesses status podem sair para manutenção
STATUS_DISPONIVEIS_MANUTENCAO = {BEM_ATIVO, BEM_INATIVO}

CATEGORIA_BEM_PADRAO = 'Outros'

# Semente da lista dinâmica 'categorias_bens' (editável pelos administradores)
CATEGORIAS_BEM_INICIAIS = [
    'TI / Informática',
    'Mobiliário',
    'Equipamentos de Cozinha',
    'Refrigeração',
    'Eletrodomésticos',
    CATEGORIA_BEM_PADRAO,
]

LISTA_CATEGORIAS_BENS = 'categorias_bens'


# =============================================================================
# NOTIFICAÇÕES / TAREFAS
# =============================================================================

NOTIF_NOVA_OS = 'new_os'
NOTIF_OS_CONCLUIDA = 'completed_os'
NOTIF_FINANCEIRO = 'finance'
NOTIF_OUTROS = 'other'

TIPOS_NOTIFICACAO = [NOTIF_NOVA_OS, NOTIF_OS_CONCLUIDA, NOTIF_FINANCEIRO, NOTIF_OUTROS]

PRIORIDADES_TAREFA = ['high', 'medium', 'low']


# =============================================================================
# CSV
# =============================================================================

CABECALHO_IMPORTACAO = [
    'Patrimonio', 'Nome', 'Categoria', 'Unidade', 'Marca', 'Modelo', 'Valor',
    'Data Aquisicao (DD/MM/AAAA)',
]

LINHA_EXEMPLO_IMPORTACAO = [
    'MB-TI-999', 'Notebook Dell Latitude', 'TI / Informática', 'Aldeota', 'Dell', '5420',
    '4500.00', '15/05/2025',
]

CABECALHO_EXPORTACAO = [
    'Patrimonio', 'Bem', 'Categoria', 'Marca', 'Modelo', 'Unidade', 'Status', 'Valor',
    'Data Aquisicao',
]
