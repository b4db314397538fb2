"""
Store de entidades em memória.

Cada coleção (ordens, despesas, tarefas, ...) é guardada como uma tupla
imutável de registros (dicts). A única forma de alterar uma coleção é
substituí-la inteira com ``replace``; quem leu a coleção anterior continua
com a sua versão intacta.

Na API o store é montado por requisição (``utils.get_store``) com um
``loader`` que lê cada coleção do banco apenas quando ela é acessada.
"""

COLECOES = (
    'orders',
    'expenses',
    'tasks',
    'users',
    'suppliers',
    'assets',
    'maintenance',
    'notifications',
    'categories',
)


class EntityStore:

    def __init__(self, loader=None, **colecoes):
        self._loader = loader
        self._colecoes = {}
        for nome, itens in colecoes.items():
            self.replace(nome, itens)

    def __getattr__(self, nome):
        if nome in COLECOES:
            return self.get(nome)
        raise AttributeError(nome)

    def _validar(self, nome):
        if nome not in COLECOES:
            raise KeyError(f"Coleção desconhecida: {nome}")

    def get(self, nome):
        self._validar(nome)
        if nome not in self._colecoes:
            itens = self._loader(nome) if self._loader else ()
            self._colecoes[nome] = tuple(itens)
        return self._colecoes[nome]

    def replace(self, nome, itens):
        """Substitui a coleção inteira e retorna a nova tupla."""
        self._validar(nome)
        self._colecoes[nome] = tuple(itens)
        return self._colecoes[nome]

    def loaded(self, nome):
        self._validar(nome)
        return nome in self._colecoes
