"""Sample websites, clone attempts and benchmarks used by ``action=init``."""

from __future__ import annotations

from typing import Any

SAMPLE_WEBSITES: list[dict[str, Any]] = [
    {
        "url": "https://stripe.com",
        "title": "Stripe - Online Payment Processing",
        "description": "Accept payments online",
        "markdown_content": (
            "# Stripe\n\nThe new standard in online payments\n\n"
            "Stripe is a suite of payment APIs that powers commerce for online "
            "businesses of all sizes."
        ),
        "html_content": (
            "<html><head><title>Stripe</title></head><body><h1>Stripe</h1>"
            "<p>The new standard in online payments</p></body></html>"
        ),
        "screenshot_url": "https://images.unsplash.com/stripe-homepage.jpg",
        "metadata": {"title": "Stripe", "description": "Online payments", "industry": "fintech"},
    },
    {
        "url": "https://vercel.com",
        "title": "Vercel - Develop. Preview. Ship.",
        "description": "Frontend cloud platform",
        "markdown_content": (
            "# Vercel\n\nDevelop. Preview. Ship.\n\n"
            "Vercel is the platform for frontend developers."
        ),
        "html_content": (
            "<html><head><title>Vercel</title></head><body><nav><h1>Vercel</h1></nav>"
            "<main><h2>Develop. Preview. Ship.</h2></main></body></html>"
        ),
        "screenshot_url": "https://images.unsplash.com/vercel-homepage.jpg",
        "metadata": {"title": "Vercel", "description": "Frontend cloud", "industry": "developer-tools"},
    },
    {
        "url": "https://tailwindcss.com",
        "title": "Tailwind CSS - Rapidly build modern websites",
        "description": "Utility-first CSS framework",
        "markdown_content": (
            "# Tailwind CSS\n\nRapidly build modern websites without ever leaving your HTML.\n\n"
            "A utility-first CSS framework packed with classes like flex, pt-4, "
            "text-center and rotate-90 that can be composed to build any design, "
            "directly in your markup."
        ),
        "html_content": (
            "<html><head><title>Tailwind CSS</title></head><body><header><h1>Tailwind CSS</h1>"
            "</header><section><h2>Rapidly build modern websites</h2></section></body></html>"
        ),
        "screenshot_url": "https://images.unsplash.com/tailwind-homepage.jpg",
        "metadata": {"title": "Tailwind CSS", "description": "CSS framework", "industry": "developer-tools"},
    },
    {
        "url": "https://openai.com",
        "title": "OpenAI - AI Research and Deployment",
        "description": "Artificial intelligence research company",
        "markdown_content": (
            "# OpenAI\n\nAI for everyone\n\n"
            "Creating safe AGI that benefits all of humanity."
        ),
        "html_content": (
            "<html><head><title>OpenAI</title></head><body><h1>OpenAI</h1>"
            "<p>AI for everyone</p></body></html>"
        ),
        "screenshot_url": "https://images.unsplash.com/openai-homepage.jpg",
        "metadata": {"title": "OpenAI", "description": "AI research", "industry": "ai"},
    },
]

_APP_TEMPLATE = """import React from "react";

export default function App() {{
  return (
    <div className="{classes}">
      <h1 className="text-4xl font-bold">{heading}</h1>
      <p className="text-xl">{tagline}</p>
    </div>
  );
}}"""

# Keyed by website URL.
SAMPLE_ATTEMPTS: dict[str, dict[str, Any]] = {
    "https://stripe.com": {
        "model_used": "ollama/llama3.2:7b",
        "style_selected": "glassmorphism",
        "additional_instructions": "Make it look modern with payment focused design",
        "generated_code": _APP_TEMPLATE.format(
            classes="min-h-screen bg-gradient-to-br from-blue-50 to-purple-50",
            heading="Stripe",
            tagline="The new standard in online payments",
        ),
        "sandbox_url": "http://localhost:3000/stripe-clone-1",
        "generation_time_ms": 3500,
    },
    "https://vercel.com": {
        "model_used": "vllm/meta-llama/CodeLlama-7b-Instruct-hf",
        "style_selected": "minimalist",
        "generated_code": _APP_TEMPLATE.format(
            classes="min-h-screen bg-white",
            heading="Vercel",
            tagline="Develop. Preview. Ship.",
        ),
        "sandbox_url": "http://localhost:3000/vercel-clone-1",
        "generation_time_ms": 2800,
    },
    "https://tailwindcss.com": {
        "model_used": "ollama/deepseek-coder:6.7b",
        "style_selected": "gradient-rich",
        "additional_instructions": "Use vibrant colors and modern gradients",
        "generated_code": _APP_TEMPLATE.format(
            classes="min-h-screen bg-gradient-to-r from-purple-400 via-pink-500 to-red-500",
            heading="Tailwind CSS",
            tagline="Rapidly build modern websites",
        ),
        "sandbox_url": "http://localhost:3000/tailwind-clone-1",
        "generation_time_ms": 4200,
    },
    "https://openai.com": {
        "model_used": "lmstudio/gpt-oss-20b",
        "style_selected": "dark-mode",
        "additional_instructions": "Create a sleek dark theme",
        "generated_code": _APP_TEMPLATE.format(
            classes="min-h-screen bg-gray-900 text-white",
            heading="OpenAI",
            tagline="AI for everyone",
        ),
        "sandbox_url": "http://localhost:3000/openai-clone-1",
        "generation_time_ms": 6800,
    },
}

SAMPLE_BENCHMARKS: list[dict[str, Any]] = [
    {
        "model_name": "llama3.2:7b", "provider": "ollama", "model_size": "7B",
        "hardware_specs": {"gpu": "RTX 3080", "ram": "32GB"},
        "website_complexity": "simple", "avg_generation_time_ms": 3200.0,
        "avg_code_quality_score": 8.2, "success_rate": 0.95,
        "avg_user_satisfaction": 4.3, "total_attempts": 50,
        "notes": "Good performance for simple websites",
    },
    {
        "model_name": "deepseek-coder:6.7b", "provider": "ollama", "model_size": "6.7B",
        "hardware_specs": {"gpu": "RTX 3080", "ram": "32GB"},
        "website_complexity": "medium", "avg_generation_time_ms": 4100.0,
        "avg_code_quality_score": 8.8, "success_rate": 0.92,
        "avg_user_satisfaction": 4.6, "total_attempts": 35,
        "notes": "Excellent for code-specific tasks",
    },
    {
        "model_name": "meta-llama/CodeLlama-7b-Instruct-hf", "provider": "vllm", "model_size": "7B",
        "hardware_specs": {"gpu": "RTX 4090", "ram": "64GB"},
        "website_complexity": "medium", "avg_generation_time_ms": 2600.0,
        "avg_code_quality_score": 8.0, "success_rate": 0.88,
        "avg_user_satisfaction": 4.2, "total_attempts": 40,
        "notes": "Fast with vLLM optimization",
    },
    {
        "model_name": "gpt-oss-20b", "provider": "lmstudio", "model_size": "20B",
        "hardware_specs": {"gpu": "RTX 4090", "ram": "64GB"},
        "website_complexity": "complex", "avg_generation_time_ms": 7200.0,
        "avg_code_quality_score": 9.1, "success_rate": 0.85,
        "avg_user_satisfaction": 4.4, "total_attempts": 25,
        "notes": "High quality but slower",
    },
]
