from taskboard.core.config import FK_DELETE_POLICY

# Política de exclusão para linhas referenciadas, aplicada no próprio schema.
# "restrict": o banco rejeita a exclusão enquanto houver referências.
# "cascade": o banco remove as linhas dependentes junto.
ON_DELETE = "CASCADE" if FK_DELETE_POLICY == "cascade" else "RESTRICT"
