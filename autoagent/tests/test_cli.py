"""Tests for the command-line entry point and the terminal chat loop."""

import json
from unittest.mock import patch

import pytest


ANALYSIS = json.dumps({"keywords": ["postgres"], "themes": ["storage"], "entities": [], "summary": "DB notes."})


@pytest.fixture
def run_chat(fake_llm):
    """Run `autoagent chat` against scripted input and a fake LLM."""
    from autoagent.chat import ChatSession, cli
    from autoagent.common.config import AppConfig
    from autoagent.common.credentials import StaticCredentialProvider

    def _run(lines, key="gsk-test", **llm_kwargs):
        config = AppConfig()
        llm = fake_llm(**llm_kwargs)

        def make_session(config):
            return ChatSession(config=config, credentials=StaticCredentialProvider(key), llm_client=llm)

        with patch("autoagent.chat.cli.load_config", return_value=config), \
             patch("autoagent.chat.cli.ChatSession", side_effect=make_session), \
             patch("builtins.input", side_effect=list(lines)):
            return cli.main(["chat"]), llm

    return _run


class TestMainDispatch:
    def test_serve_passes_host_and_port(self):
        from autoagent.chat import cli

        with patch("autoagent.chat.server.run_server") as run_server:
            assert cli.main(["serve", "--host", "0.0.0.0", "--port", "9000"]) == 0
        run_server.assert_called_once_with(host="0.0.0.0", port=9000)

    def test_chat_subcommand_dispatches(self):
        from autoagent.chat import cli

        with patch("autoagent.chat.cli.cmd_chat", return_value=0) as cmd_chat:
            assert cli.main(["chat", "--provider", "OpenAI"]) == 0
        args = cmd_chat.call_args.args[0]
        assert args.provider == "OpenAI"

    def test_subcommand_required(self):
        from autoagent.chat import cli

        with pytest.raises(SystemExit):
            cli.main([])


class TestChatRepl:
    def test_quit_exits_cleanly(self, run_chat, capsys):
        code, llm = run_chat(["/quit"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Welcome" in out
        assert "/clear" in out
        assert llm.stream_calls == []

    def test_eof_ends_session(self, run_chat):
        code, _ = run_chat([EOFError()])
        assert code == 0

    def test_index_list_and_clear(self, run_chat, capsys):
        code, _ = run_chat(
            ["index this: Postgres tuning notes", "/index", "/clear", "/index", "/quit"],
            analysis=ANALYSIS,
        )

        out = capsys.readouterr().out
        assert code == 0
        assert "Indexed content with 2 keywords. Summary: DB notes." in out
        assert "Postgres tuning notes  (postgres, storage)" in out
        assert "Index cleared. Removed 1 item(s)." in out
        assert "(index is empty)" in out

    def test_question_streams_reply(self, run_chat, capsys):
        code, llm = run_chat(["what is new?", "/quit"], chunks=["Hi", "!"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Hi!\n" in out
        assert llm.stream_calls[0][0][1] == {"role": "user", "content": "what is new?"}


class TestApiKeyPrompt:
    def test_refuses_to_start_without_key(self, capsys):
        from autoagent.chat import cli
        from autoagent.common.config import AppConfig

        with patch("autoagent.chat.cli.load_config", return_value=AppConfig()), \
             patch("getpass.getpass", return_value=""), \
             patch("autoagent.chat.cli.save_config") as save, \
             patch("builtins.input") as repl_input:
            code = cli.main(["chat"])

        assert code == 1
        assert "No API key configured" in capsys.readouterr().err
        save.assert_not_called()
        repl_input.assert_not_called()

    def test_prompted_key_is_saved_and_used(self):
        from autoagent.chat import cli
        from autoagent.common.config import AppConfig

        config = AppConfig()
        config._env_sourced_keys.add("groq_api_key")

        with patch("autoagent.chat.cli.load_config", return_value=config), \
             patch("getpass.getpass", return_value="  gsk-typed  "), \
             patch("autoagent.chat.cli.save_config") as save, \
             patch("openai.OpenAI"), \
             patch("builtins.input", side_effect=["/quit"]):
            code = cli.main(["chat"])

        assert code == 0
        assert config.llm.groq_api_key == "gsk-typed"
        assert "groq_api_key" not in config._env_sourced_keys
        save.assert_called_once_with(config)

    def test_prompt_cancelled(self):
        from autoagent.chat import cli
        from autoagent.common.config import AppConfig

        config = AppConfig()
        with patch("getpass.getpass", side_effect=KeyboardInterrupt), \
             patch("autoagent.chat.cli.save_config") as save:
            assert cli._prompt_for_key(config) is False
        save.assert_not_called()
        assert config.llm.groq_api_key == ""
