"""
Analysis Handler Module

This module defines the FastAPI endpoint that analyzes a pull request.

Design Decisions:
- Authenticate before the body is read
- Parse the raw body ourselves so malformed input maps to 400
- Run the fetch and the analysis in sequence within the request
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from pr_analyzer.api.dependencies import get_analysis_engine, get_github_client
from pr_analyzer.api.security import verify_api_key
from pr_analyzer.logging_config import get_logger
from pr_analyzer.models import AnalysisRequest, AnalysisResponse
from pr_analyzer.services.ai_engine import AnalysisEngine, AnalysisError
from pr_analyzer.services.github_client import GitHubClient, GitHubFetchError

logger = get_logger(__name__)

router = APIRouter(tags=["analysis"])


@router.post(
    "/analyze-pr",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(verify_api_key)]
)
async def analyze_pr(
    request: Request,
    github_client: GitHubClient = Depends(get_github_client),
    engine: AnalysisEngine = Depends(get_analysis_engine)
) -> AnalysisResponse:
    """
    Analyze a pull request.

    Fetches the pull request diff from GitHub and returns the selected
    model's review of it.

    Args:
        request: FastAPI request object
        github_client: Client used to fetch the diff
        engine: Dispatcher that runs the analysis

    Returns:
        AnalysisResponse with the analysis text

    Raises:
        HTTPException: 400 for a malformed body, 500 for fetch or analysis
            failures
    """
    raw_body = await request.body()

    try:
        analysis_request = AnalysisRequest.model_validate_json(raw_body)
    except ValidationError as e:
        logger.warning(
            "Invalid request body",
            error_count=e.error_count(),
            errors=[err["msg"] for err in e.errors()]
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request body"
        )

    logger.info(
        "Analyzing PR",
        repo=analysis_request.full_repo_name,
        pr_number=analysis_request.pr_number,
        model_type=analysis_request.model_type
    )

    try:
        diff = await github_client.fetch_pr_diff(
            analysis_request.owner,
            analysis_request.repo,
            analysis_request.pr_number
        )
    except GitHubFetchError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching PR changes: {e}"
        )

    try:
        analysis = await engine.analyze(diff, analysis_request.model_type)
    except AnalysisError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error analyzing changes: {e}"
        )

    logger.info(
        "PR analysis completed",
        repo=analysis_request.full_repo_name,
        pr_number=analysis_request.pr_number,
        analysis_length=len(analysis)
    )

    return AnalysisResponse(
        analysis=analysis,
        model_used=analysis_request.model_type
    )
