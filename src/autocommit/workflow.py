"""Commit pipeline orchestrated as a LangGraph state graph.

open repository -> detect changes -> require credential -> stage -> summarize
-> generate message -> commit -> publish

A clean working tree ends the graph right after detection. Any node that
raises aborts the run; side effects already applied (staged files, a local
commit) are left in place.
"""

from typing import Callable, Optional

from git import Repo
from langgraph.graph import END, StateGraph
from loguru import logger

from autocommit.errors import ConfigError
from autocommit.git_ops import GitMutator, open_repository
from autocommit.models.state import CommitOutcome, CommitState
from autocommit.nodes.diff_collector import DiffCollector
from autocommit.nodes.message_generator import MessageGenerator

MISSING_KEY_MESSAGE = "Gemini API Key not configured. Please add your API key in settings."

_QUOTES = ('"', "'")


def clean_commit_message(text: str) -> str:
    """Trim whitespace and one pair of matching straight quotes around the message."""
    message = text.strip()
    if len(message) >= 2 and message[0] in _QUOTES and message[-1] == message[0]:
        message = message[1:-1].strip()
    return message


class CommitPipeline:
    """Runs one commit cycle for a repository path and a credential."""

    def __init__(
        self,
        diff_collector: Optional[DiffCollector] = None,
        message_generator: Optional[MessageGenerator] = None,
        open_repo: Callable[[str], Repo] = open_repository,
        mutator_factory: Callable[[Repo], GitMutator] = GitMutator,
    ):
        self.diff_collector = diff_collector or DiffCollector()
        self.message_generator = message_generator or MessageGenerator()
        self.open_repo = open_repo
        self.mutator_factory = mutator_factory
        self.graph = self._create_workflow()

    def _create_workflow(self):
        workflow = StateGraph(CommitState)

        # Add nodes
        workflow.add_node("open_repository_node", self.open_repository_node)
        workflow.add_node("detect_changes_node", self.detect_changes_node)
        workflow.add_node("require_credential_node", self.require_credential_node)
        workflow.add_node("stage_changes_node", self.stage_changes_node)
        workflow.add_node("summarize_diff_node", self.summarize_diff_node)
        workflow.add_node("generate_message_node", self.generate_message_node)
        workflow.add_node("commit_node", self.commit_node)
        workflow.add_node("publish_node", self.publish_node)

        workflow.set_entry_point("open_repository_node")

        # Define edges
        workflow.add_edge("open_repository_node", "detect_changes_node")
        workflow.add_conditional_edges(
            "detect_changes_node",
            self._route_after_detection,
            {"changes": "require_credential_node", "clean": END},
        )
        workflow.add_edge("require_credential_node", "stage_changes_node")
        workflow.add_edge("stage_changes_node", "summarize_diff_node")
        workflow.add_edge("summarize_diff_node", "generate_message_node")
        workflow.add_edge("generate_message_node", "commit_node")
        workflow.add_edge("commit_node", "publish_node")
        workflow.add_edge("publish_node", END)

        return workflow.compile()

    @staticmethod
    def _route_after_detection(state: CommitState) -> str:
        return "changes" if state.get("has_changes") else "clean"

    async def open_repository_node(self, state: CommitState) -> CommitState:
        logger.info(f"Opening repository: {state['repo_path']}")
        return {"repo": self.open_repo(state["repo_path"])}

    async def detect_changes_node(self, state: CommitState) -> CommitState:
        has_changes = self.diff_collector.has_pending_changes(state["repo"])
        if not has_changes:
            logger.info("No changes to commit")
        return {"has_changes": has_changes}

    async def require_credential_node(self, state: CommitState) -> CommitState:
        if not state.get("api_key", "").strip():
            raise ConfigError(MISSING_KEY_MESSAGE)
        return {"api_key": state["api_key"].strip()}

    async def stage_changes_node(self, state: CommitState) -> CommitState:
        logger.info("Staging all changes")
        self.mutator_factory(state["repo"]).stage_all()
        return {"staged": True}

    async def summarize_diff_node(self, state: CommitState) -> CommitState:
        summary = self.diff_collector.summarize(state["repo"])
        logger.debug(f"Diff summary: {len(summary.text)} characters, truncated={summary.truncated}")
        return {"diff_summary": summary}

    async def generate_message_node(self, state: CommitState) -> CommitState:
        logger.info("Generating commit message")
        raw_message = await self.message_generator.generate(state["diff_summary"], state["api_key"])
        message = clean_commit_message(raw_message)
        logger.info(f"Generated commit message: {message}")
        return {"raw_message": raw_message, "message": message}

    async def commit_node(self, state: CommitState) -> CommitState:
        sha = self.mutator_factory(state["repo"]).commit(state["message"])
        logger.info(f"Created commit {sha[:8]}")
        return {"commit_sha": sha}

    async def publish_node(self, state: CommitState) -> CommitState:
        self.mutator_factory(state["repo"]).publish()
        logger.info("Pushed commit to remote")
        return {"pushed": True}

    async def run(self, repo_path: str, api_key: str) -> CommitOutcome:
        """Execute the pipeline once and return its outcome."""
        final_state = await self.graph.ainvoke({"repo_path": repo_path, "api_key": api_key})
        if not final_state.get("has_changes"):
            return CommitOutcome.no_changes()
        return CommitOutcome(message=final_state["message"])
