"""Pacote config: configurações carregadas de .env e variáveis de ambiente."""
