#!/usr/bin/env python3
"""
Verify one lead from the command line — scrape, score, print the analysis.

Runs the same coordinator and scorer as POST /api/verify, without the web app
or the analysis store. Set MOCK_SCRAPING=1 for an offline run.

Usage:
    python scripts/verify_lead.py --name "Jane Doe" --email jane@acme.io \\
        --title "VP Engineering" --company Acme --location "Austin, TX"
    python scripts/verify_lead.py ... --window 1year --pdf report.pdf --docx report.docx
"""
import sys
import os
import json
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from verifyit.analysis.scorer import analyze_lead
from verifyit.config import SCRAPE_TIMEOUT_SECONDS
from verifyit.logging_config import configure_logging
from verifyit.models.lead import HistoryWindow, LeadData, validation_details
from verifyit.scraping.coordinator import scrape_all_platforms
from verifyit.services.reports import render_docx, render_pdf


def build_parser():
    parser = argparse.ArgumentParser(description='Verify a sales lead against public social signals')
    parser.add_argument('--name', required=True)
    parser.add_argument('--email', required=True)
    parser.add_argument('--title', required=True)
    parser.add_argument('--company', required=True)
    parser.add_argument('--location', required=True)
    parser.add_argument('--window', default=HistoryWindow.SIX_MONTHS.value,
                        choices=[w.value for w in HistoryWindow], help='History window (default: 6months)')
    parser.add_argument('--linkedin', default='', help='LinkedIn profile URL')
    parser.add_argument('--x', dest='x_url', default='', help='X profile URL')
    parser.add_argument('--timeout', type=float, default=SCRAPE_TIMEOUT_SECONDS,
                        help='Per-platform timeout in seconds')
    parser.add_argument('--pdf', help='Also write the PDF report to this path')
    parser.add_argument('--docx', help='Also write the DOCX report to this path')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        lead = LeadData.model_validate({
            'name': args.name,
            'email': args.email,
            'title': args.title,
            'company': args.company,
            'location': args.location,
            'historyWindow': args.window,
            'profileLinks': {'linkedin': args.linkedin, 'x': args.x_url},
        })
    except ValidationError as e:
        for field, message in validation_details(e).items():
            print(f'Invalid {field}: {message}', file=sys.stderr)
        return 2

    signals = scrape_all_platforms(lead, timeout=args.timeout)
    analysis = analyze_lead(lead, signals)
    print(json.dumps(analysis.to_dict(), indent=2))

    if args.pdf:
        with open(args.pdf, 'wb') as f:
            f.write(render_pdf(analysis, lead.summary()))
        print(f'PDF written to {args.pdf}', file=sys.stderr)
    if args.docx:
        with open(args.docx, 'wb') as f:
            f.write(render_docx(analysis, lead.summary()))
        print(f'DOCX written to {args.docx}', file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
